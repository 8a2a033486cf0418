"""
Tests for organisational level resolution, inconsistency warnings and
the level helpers.

Run with:
    pytest tests/test_organizational_level_service.py -v
"""

import logging

import pytest

from constants.organizational_levels import (
    ORGANIZATIONAL_LEVELS,
    OrganizationalCategory,
    PositionType,
    WarningSeverity,
)
from schemas.employee_schemas import EmployeeRecord
from services.organizational_level_service import (
    RESOLUTION_RULES,
    categorize_organizational_level,
    check_data_consistency,
    count_employees_by_organizational_level,
    determine_employee_position,
    determine_staff_position,
    get_organizational_summary,
    get_position_type,
    get_position_type_by_level,
    group_employees_by_organizational_level,
    is_eselon_level,
    is_staff_level,
    is_valid_organizational_level,
    match_eselon_label,
    match_organizational_level_from_sub_position,
    normalize_organizational_level,
    resolve_organizational_level,
    simplify_organizational_level,
    validate_organizational_data_consistency,
    validate_organizational_level,
)

SERVICE_LOGGER = "services.organizational_level_service"


# ============================================================================
# Resolver
# ============================================================================

class TestResolveOrganizationalLevel:

    def test_consistent_eselon_ii(self):
        result = resolve_organizational_level("Plt. Kepala Dinas Sosial", "Provinsi Kalimantan Selatan", "IV/c")
        assert result.category == OrganizationalCategory.ESELON_II
        assert result.rule == "position"
        assert result.warning is None

    def test_staff_label_with_high_golongan_warns_high(self):
        result = resolve_organizational_level("Staff ASN Sekretariat", golongan="IV/e")
        assert result.category == OrganizationalCategory.STAFF
        assert result.position_inference == OrganizationalCategory.STAFF
        assert result.golongan_inference == OrganizationalCategory.ESELON_II
        assert result.warning is not None
        assert result.warning.severity == WarningSeverity.HIGH
        assert result.warning.golongan == "IV/e"
        assert result.warning.position_level == OrganizationalCategory.STAFF
        assert result.warning.golongan_suggested_level == OrganizationalCategory.ESELON_II

    def test_two_step_gap_is_medium(self):
        result = resolve_organizational_level("Kepala Seksi Pelayanan", golongan="IV/c")
        assert result.category == OrganizationalCategory.ESELON_IV
        assert result.warning.severity == WarningSeverity.MEDIUM

    def test_one_step_gap_does_not_warn(self):
        result = resolve_organizational_level("Kepala Seksi Pelayanan", golongan="IV/a")
        assert result.warning is None

    def test_golongan_breaks_ties_for_unclear_titles(self):
        result = resolve_organizational_level("Pengemudi", golongan="IV/a")
        assert result.category == OrganizationalCategory.ESELON_III
        assert result.rule == "golongan"

    def test_invalid_golongan_counts_as_staff(self):
        result = resolve_organizational_level("Pengemudi", golongan="xyz")
        assert result.category == OrganizationalCategory.STAFF
        assert result.golongan_inference == OrganizationalCategory.STAFF

    def test_no_signal_is_other(self):
        result = resolve_organizational_level("Pengemudi")
        assert result.category == OrganizationalCategory.OTHER
        assert result.rule == "fallback"
        assert result.golongan_inference is None

    def test_unknown_position_overrides_golongan(self):
        result = resolve_organizational_level("Unknown", golongan="IV/c")
        assert result.category == OrganizationalCategory.OTHER
        assert result.rule == "unknown_position"
        assert result.warning is None

    def test_explicit_eselon_label(self):
        assert resolve_organizational_level("Es III").category == OrganizationalCategory.ESELON_III

    def test_rule_order(self):
        assert [rule.name for rule in RESOLUTION_RULES] == [
            "unknown_position", "position", "golongan", "fallback"
        ]


class TestInconsistencyLogging:

    def test_high_severity_logs_error(self, caplog):
        with caplog.at_level(logging.INFO, logger=SERVICE_LOGGER):
            resolve_organizational_level("Staff ASN Sekretariat", golongan="IV/e")
        records = [r for r in caplog.records if r.name == SERVICE_LOGGER]
        assert len(records) == 1
        assert records[0].levelno == logging.ERROR
        assert records[0].getMessage().startswith("[Data Inconsistency - HIGH]")

    def test_medium_severity_logs_warning(self, caplog):
        with caplog.at_level(logging.INFO, logger=SERVICE_LOGGER):
            resolve_organizational_level("Kepala Seksi", golongan="IV/d")
        records = [r for r in caplog.records if r.name == SERVICE_LOGGER]
        assert [r.levelno for r in records] == [logging.WARNING]

    def test_logging_can_be_disabled(self, caplog):
        with caplog.at_level(logging.INFO, logger=SERVICE_LOGGER):
            resolve_organizational_level("Staff ASN Sekretariat", golongan="IV/e", log_warnings=False)
        assert not [r for r in caplog.records if r.name == SERVICE_LOGGER]


class TestConsistencyChecks:

    def test_check_data_consistency(self):
        warning = check_data_consistency(
            OrganizationalCategory.ESELON_III, OrganizationalCategory.STAFF, "IV/a"
        )
        assert warning.severity == WarningSeverity.MEDIUM
        assert "IV/a" in warning.message
        assert warning.type == "golongan_position_mismatch"

    def test_lower_golongan_never_warns(self):
        assert check_data_consistency(
            OrganizationalCategory.STAFF, OrganizationalCategory.ESELON_II, "II/a"
        ) is None

    def test_validate_without_resolving(self):
        warning = validate_organizational_data_consistency("Unknown Position", "IV/c")
        assert warning.severity == WarningSeverity.HIGH
        assert validate_organizational_data_consistency("Eselon II", "IV/c") is None
        assert validate_organizational_data_consistency("Eselon II", None) is None


# ============================================================================
# Helpers
# ============================================================================

class TestLevelHelpers:

    def test_normalize_organizational_level(self):
        assert normalize_organizational_level("  es   iii ") == "eselon iii"
        assert normalize_organizational_level("Eselon  II") == "Eselon II"
        assert normalize_organizational_level(None) == ""

    @pytest.mark.parametrize("text,category", [
        ("Eselon II", OrganizationalCategory.ESELON_II),
        ("Es 3", OrganizationalCategory.ESELON_III),
        ("Echelon IV", OrganizationalCategory.ESELON_IV),
        ("esl 4", OrganizationalCategory.ESELON_IV),
        ("Staff", None),
    ])
    def test_match_eselon_label(self, text, category):
        assert match_eselon_label(text) == category

    @pytest.mark.parametrize("label,category", [
        ("Eselon III", OrganizationalCategory.ESELON_III),
        ("esl iv", OrganizationalCategory.ESELON_IV),
        ("Staff ASN Sekretariat", OrganizationalCategory.STAFF),
        ("Staff Non ASN Bidang Hukum", OrganizationalCategory.STAFF),
        ("Staff/Other", OrganizationalCategory.STAFF),
        ("", OrganizationalCategory.OTHER),
    ])
    def test_categorize(self, label, category):
        assert categorize_organizational_level(label) == category

    def test_every_known_level_categorizes(self):
        for label in ORGANIZATIONAL_LEVELS:
            category = categorize_organizational_level(label)
            assert category != OrganizationalCategory.OTHER, label
            assert category.is_eselon == label.startswith("Eselon")

    def test_is_eselon_and_staff(self):
        assert is_eselon_level("Eselon II")
        assert not is_eselon_level("Staff ASN Sekretariat")
        assert is_staff_level("Staff ASN Sekretariat")
        assert not is_staff_level("Eselon IV")

    def test_position_type(self):
        assert get_position_type("Eselon IV") == PositionType.ESELON
        assert get_position_type("Staff ASN Sekretariat", "Koordinator Lapangan") == PositionType.ESELON
        assert get_position_type("Staff", "Operator") == PositionType.STAFF
        assert get_position_type_by_level("Eselon III") == PositionType.ESELON
        assert get_position_type_by_level("Staff/Other") == PositionType.STAFF

    def test_simplify(self):
        assert simplify_organizational_level("Eselon III") == "Eselon"
        assert simplify_organizational_level("Staff ASN Sekretariat") == "Staff"
        assert simplify_organizational_level("Pengemudi", "IV/c") == "Eselon"
        assert simplify_organizational_level("Pengemudi", "II/a") == "Staff"

    def test_is_valid_organizational_level(self):
        assert is_valid_organizational_level("Eselon II")
        assert is_valid_organizational_level("eselon ii")
        assert not is_valid_organizational_level("Manager")
        assert not is_valid_organizational_level(None)

    def test_match_level_from_sub_position(self):
        assert match_organizational_level_from_sub_position(
            "Staff Non ASN Bidang Penanganan Bencana"
        ) == "Staff Non ASN Bidang Penanganan Bencana"
        assert match_organizational_level_from_sub_position(
            "staff asn rehabilitasi"
        ) == "Staff ASN Bidang Rehabilitasi Sosial"
        assert match_organizational_level_from_sub_position("Bidang Hukum") is None
        assert match_organizational_level_from_sub_position("") is None

    def test_determine_staff_position(self):
        assert determine_staff_position("Analis", "Bidang Hukum", "III/a") == "Staff ASN Bidang Hukum"
        assert determine_staff_position("Pengemudi", "Umum", None) == "Staff Non ASN Sekretariat"
        assert determine_staff_position(
            "Pendamping", "Bidang Penanganan Bencana", "-"
        ) == "Staff Non ASN Bidang Penanganan Bencana"

    def test_determine_employee_position(self):
        assert determine_employee_position("Kepala Bidang", "Bidang Hukum", "IV/a") == "Eselon III"
        assert determine_employee_position("Analis", "Bidang Hukum", "III/a") == "Staff ASN Bidang Hukum"
        assert determine_employee_position("Unknown", "", "III/a") == "Other"


class TestGrouping:

    @pytest.fixture
    def employees(self):
        return [
            {"name": "A", "organizational_level": "Eselon III"},
            {"name": "B", "organizational_level": "Staff ASN Sekretariat"},
            {"name": "C", "organizational_level": "Staff Non ASN Sekretariat"},
            {"name": "D", "organizational_level": "Pengemudi"},
            EmployeeRecord(
                name="E", gol="IV/c", organizational_level=OrganizationalCategory.ESELON_II
            ),
        ]

    def test_group(self, employees):
        grouped = group_employees_by_organizational_level(employees)
        assert list(grouped) == ["Eselon II", "Eselon III", "Eselon IV", "Staff", "Other"]
        assert [e["name"] for e in grouped["Staff"]] == ["B", "C"]
        assert grouped["Eselon II"][0].name == "E"

    def test_count(self, employees):
        assert count_employees_by_organizational_level(employees) == {
            "Eselon II": 1,
            "Eselon III": 1,
            "Eselon IV": 0,
            "Staff": 2,
            "Other": 1,
        }

    def test_summary(self, employees):
        summary = get_organizational_summary(employees)
        assert summary.eselon_count == 2
        assert summary.asn_staff_count == 1
        assert summary.non_asn_staff_count == 1
        assert summary.other_count == 1
        assert summary.total_count == 5


class TestValidateOrganizationalLevel:

    def test_valid(self):
        result = validate_organizational_level("Eselon IV")
        assert result.is_valid
        assert result.category == OrganizationalCategory.ESELON_IV
        assert result.suggestions == []

    def test_suggestions_for_near_miss(self):
        result = validate_organizational_level("Eselon V")
        assert not result.is_valid
        assert result.suggestions == ["Eselon II", "Eselon III", "Eselon IV"]

    def test_empty(self):
        result = validate_organizational_level("")
        assert not result.is_valid
        assert result.category == OrganizationalCategory.OTHER
        assert result.suggestions == ORGANIZATIONAL_LEVELS[:5]
