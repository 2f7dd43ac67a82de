"""Unit tests for raw record standardization."""

import pytest

from tourguide.models import StandardizedAddress
from tourguide.services.standardizer import (
    address_details,
    extract_state_code,
    neighborhood_label,
    standardize_address,
)

PAULISTA = {
    "place_id": 123,
    "display_name": "1578, Avenida Paulista, Bela Vista, São Paulo, SP, 01310-200, Brasil",
    "address": {
        "house_number": "1578",
        "road": "Avenida Paulista",
        "neighbourhood": "Bela Vista",
        "suburb": "Bela Vista",
        "city": "São Paulo",
        "state": "São Paulo",
        "ISO3166-2-lvl4": "BR-SP",
        "postcode": "01310-200",
        "country": "Brasil",
        "country_code": "br",
    },
}


class TestExtractStateCode:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("BR-SP", "SP"),
            ("BR-RJ", "RJ"),
            ("US-CA", None),
            ("SP", None),
            ("", None),
            (None, None),
            (42, None),
        ],
    )
    def test_extract(self, value, expected) -> None:
        assert extract_state_code(value) == expected


class TestAddressDetails:
    def test_nested_object(self) -> None:
        assert address_details(PAULISTA)["road"] == "Avenida Paulista"

    @pytest.mark.parametrize("raw", [None, [], "x", {}, {"address": "Rua A"}])
    def test_missing_object(self, raw) -> None:
        assert address_details(raw) == {}


class TestStandardizeAddress:
    """Tests for mapping Nominatim records."""

    def test_full_record(self) -> None:
        address = standardize_address(PAULISTA)
        assert address == StandardizedAddress(
            street="Avenida Paulista",
            house_number="1578",
            neighborhood="Bela Vista",
            city="São Paulo",
            state="São Paulo",
            state_code="SP",
            postal_code="01310-200",
            country="Brasil",
        )
        assert address.full_address() == (
            "Avenida Paulista, 1578, Bela Vista, São Paulo, SP, 01310-200"
        )

    def test_osm_tags_take_priority(self) -> None:
        raw = {"address": {"addr:street": "Rua da Aurora", "road": "BR-101", "city": "Recife"}}
        assert standardize_address(raw).street == "Rua da Aurora"

    def test_fallback_keys(self) -> None:
        raw = {"address": {"pedestrian": "Calçadão", "quarter": "Quadra 5", "village": "Vila Velha"}}
        address = standardize_address(raw)
        assert address.street == "Calçadão"
        assert address.neighborhood == "Quadra 5"
        assert address.city == "Vila Velha"

    def test_hamlet_is_not_a_city(self) -> None:
        raw = {"address": {"hamlet": "Sítio Novo", "municipality": "Caruaru"}}
        assert standardize_address(raw).city == "Caruaru"

    def test_two_letter_state_becomes_code(self) -> None:
        raw = {"address": {"city": "Niterói", "state": "RJ"}}
        assert standardize_address(raw).state_code == "RJ"

    def test_explicit_state_code(self) -> None:
        raw = {"address": {"city": "Ouro Preto", "state_code": "MG"}}
        assert standardize_address(raw).city_label() == "Ouro Preto, MG"

    def test_country_normalized(self) -> None:
        assert standardize_address({"address": {"country": "Brazil"}}).country == "Brasil"
        assert standardize_address({"address": {"city": "Lima", "country": "Peru"}}).country == "Peru"

    @pytest.mark.parametrize("raw", [None, {}, {"display_name": "Somewhere"}])
    def test_missing_address_gives_empty_result(self, raw) -> None:
        address = standardize_address(raw)
        assert address == StandardizedAddress()
        assert str(address) == "StandardizedAddress: Empty address"


class TestNeighborhoodLabel:
    def test_combines_distinct_values(self) -> None:
        raw = {"address": {"neighbourhood": "Jardins", "suburb": "Jardim Paulista"}}
        assert neighborhood_label(raw) == "Jardins, Jardim Paulista"

    def test_identical_values_not_repeated(self) -> None:
        assert neighborhood_label(PAULISTA) == "Bela Vista"

    def test_single_values(self) -> None:
        assert neighborhood_label({"address": {"suburb": "Pinheiros"}}) == "Pinheiros"
        assert neighborhood_label({"address": {"quarter": "Setor Sul"}}) == "Setor Sul"

    def test_no_values(self) -> None:
        assert neighborhood_label({"address": {"city": "Recife"}}) is None
        assert neighborhood_label(None) is None
