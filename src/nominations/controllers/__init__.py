from .admin import NominationAdminController
from .nominations import NominationController

__all__ = ["NominationController", "NominationAdminController"]
