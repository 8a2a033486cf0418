from constants.organizational_levels import OrganizationalCategory
from services.employee_store import EmployeeRepository, InMemoryEmployeeLevelProvider
from services.roster_parser import parse_employee_csv


class TestInMemoryEmployeeLevelProvider:

    def test_mapping_is_copied(self):
        source = {"A": "Eselon III"}
        provider = InMemoryEmployeeLevelProvider(source)
        provider.get_org_level_mapping()["B"] = "Staff"
        assert provider.get_org_level_mapping() == {"A": "Eselon III"}

    def test_from_records(self, roster_text):
        provider = InMemoryEmployeeLevelProvider.from_records(parse_employee_csv(roster_text))
        assert provider.get_level("MURJANI, S.Pd, MM") == "Eselon III"
        assert provider.get_level("Nobody") is None


class TestEmployeeRepository:

    def test_save_and_list(self, db_session, roster_text):
        repository = EmployeeRepository(db_session)
        records = parse_employee_csv(roster_text)

        assert repository.save_employees(records) == 5
        stored = repository.list_employees()
        assert [r.name for r in stored] == [r.name for r in records]
        assert stored[0].organizational_level == OrganizationalCategory.ESELON_II
        assert stored[3].detailed_position == "Staff Non ASN Sekretariat"

    def test_append_and_replace(self, db_session, roster_text):
        repository = EmployeeRepository(db_session)
        records = parse_employee_csv(roster_text)

        repository.save_employees(records)
        repository.save_employees(records[:2])
        assert repository.count() == 7

        repository.save_employees(records[:2], replace_existing=True)
        assert repository.count() == 2

    def test_org_level_mapping(self, db_session, roster_text):
        repository = EmployeeRepository(db_session)
        repository.save_employees(parse_employee_csv(roster_text))
        mapping = repository.get_org_level_mapping()
        assert mapping["MUHAMMADUN, A.KS, M.I.Kom"] == "Eselon II"
        assert mapping["BUDI SANTOSO"] == "Staff ASN Bidang Hukum"
