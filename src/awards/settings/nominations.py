"""Nomination settings: autosave cadence, upload limits and category display order."""

from decouple import config

# Debounce window for draft autosave, in milliseconds.
DRAFT_AUTOSAVE_DEBOUNCE_MS: int = config("DRAFT_AUTOSAVE_DEBOUNCE_MS", default=1500, cast=int)

# Hard limit for a single staged attachment.
NOMINATION_MAX_UPLOAD_SIZE: int = config("NOMINATION_MAX_UPLOAD_SIZE", default=10 * 1024 * 1024, cast=int)

# Storage prefix for nomination attachments: <prefix>/<user>/<category>/<timestamp>_<filename>
NOMINATION_UPLOAD_ROOT: str = config("NOMINATION_UPLOAD_ROOT", default="nominations")

# Presentation contract for dashboards: segments in order, then categories in order within each segment.
AWARD_SEGMENT_ORDER: list[str] = ["Organization", "Initiatives", "Individual"]

AWARD_CATEGORY_ORDER: dict[str, list[str]] = {
    "Organization": [
        "Comprehensive Maternity Hospital of the Year (National)",
        "Comprehensive Maternity Hospital of the Year (Regional)",
        "High-Risk Pregnancy & Maternal Critical Care Centre of the Year",
        "Centre of Excellence in Fetal Medicine",
        "Neonatal Intensive Care Unit (NICU) of the Year",
        "Excellence in Labour, Delivery & Birthing Infrastructure",
        "Fertility & Reproductive Medicine Centre of the Year",
        "Rural & Underserved Area Maternity Care Excellence",
        "Sustainable & Green Maternity Facility of the Year",
        "Tele-Maternity & Remote Monitoring Solution of the Year",
        "Medical Device Innovation for Labour & NICU",
        "Maternal Health Data & Analytics Solution of the Year",
        "Emerging Maternal Health Start-up of the Year",
        "Maternal Nutrition Brand of the Year",
        "Baby Care Brand of the Year",
        "Mother & Baby Retail Platform of the Year",
        "Innovation in Baby Gear & Infant Safety",
        "Maternity Wear & Comfort Solutions Brand of the Year",
        "Breastfeeding & Lactation Product Innovation Award",
        "Organic & Clean Label Baby Products Brand of the Year",
    ],
    "Initiatives": [
        "Digital Innovation in Maternal Health",
        "AI Innovation in Obstetrics & Neonatal Care",
        "Maternal Health Awareness & CSR Initiative of the Year",
        "Community Outreach for Safe Motherhood",
        "Maternal Mental Health Initiative of the Year",
        "Postpartum Recovery & Rehabilitation Program of the Year",
        "Lactation Support & Breastfeeding Promotion Initiative",
        "Newborn Screening & Preventive Care Initiative",
        "Maternal Health Policy, Advocacy & Systems Impact Award",
        "Breakthrough IVF Advancement Award",
    ],
    "Individual": [
        "Obstetrician of the Year",
        "Neonatologist of the Year",
        "Fertility Specialist of the Year",
        "Fetal Medicine Specialist of the Year",
        "Midwife / Maternity Nurse Leader of the Year",
        "Transformational Leader in Maternity Healthcare",
    ],
}
