# ruff: noqa: F403
from .base import *
from .llm import *
from .ninja import *
from .nominations import *
from .observability import *
from .unfold import *
