import enum


class OrganizationalCategory(str, enum.Enum):
    """Coarse organisational category of an employee."""
    ESELON_II = "Eselon II"
    ESELON_III = "Eselon III"
    ESELON_IV = "Eselon IV"
    STAFF = "Staff"
    OTHER = "Other"

    @property
    def rank(self) -> int:
        return LEVEL_HIERARCHY[self]

    @property
    def is_eselon(self) -> bool:
        return self in ESELON_CATEGORIES


class PositionType(str, enum.Enum):
    """Position type used for performance weighting."""
    ESELON = "eselon"
    STAFF = "staff"


class WarningSeverity(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


ESELON_CATEGORIES = frozenset({
    OrganizationalCategory.ESELON_II,
    OrganizationalCategory.ESELON_III,
    OrganizationalCategory.ESELON_IV,
})

LEVEL_HIERARCHY = {
    OrganizationalCategory.ESELON_II: 4,
    OrganizationalCategory.ESELON_III: 3,
    OrganizationalCategory.ESELON_IV: 2,
    OrganizationalCategory.STAFF: 1,
    OrganizationalCategory.OTHER: 0,
}

# Golongan must outrank the position by this many steps to raise a warning
INCONSISTENCY_THRESHOLD = 2
HIGH_SEVERITY_THRESHOLD = 3

STAFF_ASN_PREFIX = "Staff ASN"
STAFF_NON_ASN_PREFIX = "Staff Non ASN"
STAFF_OTHER_LABEL = "Staff/Other"

ORGANIZATIONAL_LEVELS = [
    "Eselon II",
    "Eselon III",
    "Eselon IV",
    f"{STAFF_ASN_PREFIX} Sekretariat",
    f"{STAFF_NON_ASN_PREFIX} Sekretariat",
    f"{STAFF_ASN_PREFIX} Bidang Hukum",
    f"{STAFF_ASN_PREFIX} Bidang Pemberdayaan Sosial",
    f"{STAFF_NON_ASN_PREFIX} Bidang Pemberdayaan Sosial",
    f"{STAFF_ASN_PREFIX} Bidang Rehabilitasi Sosial",
    f"{STAFF_NON_ASN_PREFIX} Bidang Rehabilitasi Sosial",
    f"{STAFF_ASN_PREFIX} Bidang Perlindungan dan Jaminan Sosial",
    f"{STAFF_NON_ASN_PREFIX} Bidang Perlindungan dan Jaminan Sosial",
    f"{STAFF_ASN_PREFIX} Bidang Penanganan Bencana",
    f"{STAFF_NON_ASN_PREFIX} Bidang Penanganan Bencana",
]

# Whole-label abbreviations accepted for organisational level strings
LEVEL_ABBREVIATIONS = {
    "es ii": "eselon ii",
    "es iii": "eselon iii",
    "es iv": "eselon iv",
    "esl ii": "eselon ii",
    "esl iii": "eselon iii",
    "esl iv": "eselon iv",
    "echelon": "eselon",
    "staff asn sek": "staff asn sekretariat",
    "staff non asn sek": "staff non asn sekretariat",
    "staff asn hukum": "staff asn bidang hukum",
    "staff asn pembsos": "staff asn bidang pemberdayaan sosial",
    "staff non asn pembsos": "staff non asn bidang pemberdayaan sosial",
    "staff asn rehsos": "staff asn bidang rehabilitasi sosial",
    "staff non asn rehsos": "staff non asn bidang rehabilitasi sosial",
    "staff asn perlindsos": "staff asn bidang perlindungan dan jaminan sosial",
    "staff non asn perlindsos": "staff non asn bidang perlindungan dan jaminan sosial",
    "staff asn bencana": "staff asn bidang penanganan bencana",
    "staff non asn bencana": "staff non asn bidang penanganan bencana",
}

# Word-level abbreviations expanded inside job titles
POSITION_ABBREVIATIONS = {
    "kep": "kepala",
    "mgr": "manager",
    "dir": "direktur",
    "ka bag": "kabag",
    "ka sub bag": "kasubag",
    "ka subbag": "kasubag",
    "pj": "penanggung jawab",
    "plt": "pelaksana tugas",
    "plh": "pelaksana harian",
}

UNKNOWN_POSITION_MARKERS = ("unknown", "tidak diketahui")
STAFF_MARKERS = ("staff", "staf")
DEPARTMENT_CONTEXT_MARKERS = ("bidang", "sekretariat", "bagian", "seksi")

# Department keyword -> staff unit suffix, checked in order
STAFF_DEPARTMENTS = [
    (("sekretariat",), "Sekretariat"),
    (("hukum",), "Bidang Hukum"),
    (("pemberdayaan",), "Bidang Pemberdayaan Sosial"),
    (("rehabilitasi",), "Bidang Rehabilitasi Sosial"),
    (("perlindungan", "jaminan"), "Bidang Perlindungan dan Jaminan Sosial"),
    (("bencana", "penanganan"), "Bidang Penanganan Bencana"),
]

SUGGESTION_SIMILARITY_THRESHOLD = 0.3
MAX_SUGGESTIONS = 3
