from property_history.links import find_record_link, iter_record_links

from conftest import PARCEL_URL, SEARCH_PAGE_RAW


def test_finds_exact_anchor():
    markup = f"[8 LYNNBROOK ROAD]({PARCEL_URL})"
    assert find_record_link("8 Lynnbrook Road", markup) == ("8 LYNNBROOK ROAD", PARCEL_URL)


def test_skips_other_addresses():
    assert find_record_link("8 Lynnbrook Road", SEARCH_PAGE_RAW) == ("8 LYNNBROOK ROAD", PARCEL_URL)
    anchor, url = find_record_link("12 Oak Street", SEARCH_PAGE_RAW)
    assert anchor == "12 OAK STREET"
    assert url.endswith("pid=1001")


def test_matches_rd_against_road():
    assert find_record_link("8 Lynnbrook Rd", f"[8 LYNNBROOK ROAD]({PARCEL_URL})")[1] == PARCEL_URL
    assert find_record_link("8 Lynnbrook Road", f"[8 LYNNBROOK RD]({PARCEL_URL})")[1] == PARCEL_URL


def test_matches_encoded_anchor_text():
    assert find_record_link("8 Lynnbrook Road", f"[8+LYNNBROOK+ROAD]({PARCEL_URL})") == (
        "8 LYNNBROOK ROAD",
        PARCEL_URL,
    )
    assert find_record_link("8 Lynnbrook Road", f"[8%20LYNNBROOK%20RD]({PARCEL_URL})") == (
        "8 LYNNBROOK RD",
        PARCEL_URL,
    )


def test_falls_back_to_house_number_and_street():
    markup = (
        "[18 LYNNBROOK ROAD](https://gis.vgsi.com/fairfieldct/Parcel.aspx?pid=9)\n"
        f"[8 LYNNBROOK RD UNIT 2]({PARCEL_URL})"
    )
    assert find_record_link("8 Lynnbrook Road", markup) == ("8 LYNNBROOK RD UNIT 2", PARCEL_URL)


def test_loose_match_reports_the_anchor_it_matched():
    markup = "[8 LYNNBROOK LANE](https://gis.vgsi.com/fairfieldct/Parcel.aspx?pid=9999)"
    assert find_record_link("8 Lynnbrook Road", markup) == (
        "8 LYNNBROOK LANE",
        "https://gis.vgsi.com/fairfieldct/Parcel.aspx?pid=9999",
    )


def test_ignores_links_that_are_not_record_pages():
    markup = "[8 LYNNBROOK ROAD](https://gis.vgsi.com/fairfieldct/Search.aspx)"
    assert find_record_link("8 Lynnbrook Road", markup) is None


def test_no_match_returns_none():
    assert find_record_link("9 Elm Street", SEARCH_PAGE_RAW) is None
    assert find_record_link("8 Lynnbrook Road", "") is None


def test_iter_record_links():
    assert list(iter_record_links(SEARCH_PAGE_RAW)) == [
        ("12 OAK STREET", "https://gis.vgsi.com/fairfieldct/Parcel.aspx?pid=1001"),
        ("8 LYNNBROOK ROAD", PARCEL_URL),
    ]
