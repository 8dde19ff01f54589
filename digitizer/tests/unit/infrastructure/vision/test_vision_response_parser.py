from digitizer.infrastructure.vision.vision_response_parser import VisionResponseParser


def test_parse_rows_from_rows_key():
    parser = VisionResponseParser()
    payload = {"rows": [{"Name": "Ada", "Age": 36}, {"Name": "Alan", "Age": 41}]}

    rows = parser.parse_rows(payload)

    assert rows == [{"Name": "Ada", "Age": 36}, {"Name": "Alan", "Age": 41}]


def test_parse_rows_from_bare_list():
    parser = VisionResponseParser()
    assert parser.parse_rows([{"a": 1}, "noise", {"b": None}]) == [{"a": 1}, {"b": None}]


def test_parse_rows_from_alternate_container():
    parser = VisionResponseParser()
    assert parser.parse_rows({"data": [{"x": "1"}]}) == [{"x": "1"}]
    assert parser.parse_rows({"table": [{"x": "2"}], "title": "Invoice"}) == [{"x": "2"}]


def test_flat_object_is_single_row():
    parser = VisionResponseParser()
    assert parser.parse_rows({"Invoice": "INV-1", "Total": 12.5}) == [{"Invoice": "INV-1", "Total": 12.5}]


def test_nested_values_are_flattened_to_strings():
    parser = VisionResponseParser()
    rows = parser.parse_rows({"rows": [{" Items ": ["a", "b"], "Meta": {"k": 1}}]})
    assert rows == [{"Items": "a, b", "Meta": '{"k": 1}'}]


def test_empty_rows_are_valid():
    parser = VisionResponseParser()
    assert parser.parse_rows({"rows": []}) == []


def test_unrecognized_payload_returns_none():
    parser = VisionResponseParser()
    assert parser.parse_rows("just text") is None
    assert parser.parse_rows({"a": [1], "b": [2]}) is None
