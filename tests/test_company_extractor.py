import pytest

from ace.research.company import company_from_profile_title, domain_base, extract_company_name, split_title


class TestSplitTitle:
    """Test title segmentation."""

    def test_all_separators(self):
        title = "A - B | C : D • E · F – G — H"
        assert split_title(title) == ["A", "B", "C", "D", "E", "F", "G", "H"]

    def test_drops_empty_segments(self):
        assert split_title(" - Acme || Home ") == ["Acme", "Home"]

    def test_empty(self):
        assert split_title("") == []


class TestDomainBase:
    """Test picking the organization label from a domain."""

    @pytest.mark.parametrize("domain,expected", [
        ("acme.com", "acme"),
        ("cs.stanford.edu", "stanford"),
        ("agency.state.gov", "state"),
        ("www.acme.co.uk", "acme"),
        ("mail.acme.com", "mail"),
        ("ab.com", "ab"),
    ])
    def test_domain_base(self, domain, expected):
        assert domain_base(domain) == expected


class TestExtractCompanyName:
    """Test company name extraction from result titles."""

    def test_domain_prefix_segment(self):
        assert extract_company_name("Acme Corp - Welcome", "acme.com") == "Acme Corp"

    def test_landing_page_without_company_segment(self):
        assert extract_company_name("Home - Sign In", "acme.com") == "Home"

    def test_landing_page_prefix_skipped(self):
        assert extract_company_name("Welcome | Initech Partners", "zz.com") == "Initech Partners"

    def test_with_phrase(self):
        assert extract_company_name("Work with Globex Industries", "other.com") == "Globex Industries"

    def test_with_phrase_case_insensitive(self):
        assert extract_company_name("Partner WITH Globex", "") == "Globex"

    def test_first_segment_starts_with_domain(self):
        assert extract_company_name("madrona.com - Venture Capital", "madrona.com") == "madrona.com"

    def test_domain_match_ignores_spaces_dots_hyphens(self):
        assert extract_company_name("Our Team | Mad.Rona Ventures", "madrona.com") == "Mad.Rona Ventures"

    def test_short_base_uses_whole_base(self):
        assert extract_company_name("About | IBM Research", "ibm.com") == "IBM Research"

    def test_falls_back_to_first_segment(self):
        assert extract_company_name("Globex | Careers", "acme.com") == "Globex"

    def test_no_segments_returns_raw_title(self):
        assert extract_company_name(" - | ", "acme.com") == " - | "

    def test_empty_domain_skips_domain_steps(self):
        assert extract_company_name("Globex | Acme", "") == "Globex"

    def test_edu_domain(self):
        assert extract_company_name("Computer Science | Stanford University", "cs.stanford.edu") == "Stanford University"

    @pytest.mark.parametrize("title,domain", [
        ("Acme Corp - Welcome", "acme.com"),
        ("Home - Sign In", "acme.com"),
        ("Work with Globex", ""),
    ])
    def test_deterministic(self, title, domain):
        assert extract_company_name(title, domain) == extract_company_name(title, domain)


class TestCompanyFromProfileTitle:
    """Test employer extraction from profile titles."""

    def test_last_non_name_segment(self):
        assert company_from_profile_title("Jane Doe - VP Sales - Initech | LinkedIn", "Jane Doe") == "Initech"

    def test_name_match_is_case_insensitive(self):
        assert company_from_profile_title("JANE DOE - Initech", "jane doe") == "Initech"

    def test_segment_contained_in_name_dropped(self):
        assert company_from_profile_title("Jane - Initech", "Jane Doe") == "Initech"

    def test_only_name_and_site(self):
        assert company_from_profile_title("Jane Doe | LinkedIn", "Jane Doe") is None
