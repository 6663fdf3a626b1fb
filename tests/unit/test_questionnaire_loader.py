"""Tests for loading questionnaires and responses from documents."""

import json
from datetime import date
from decimal import Decimal

import pytest
import yaml

from resource_mapper.core.exceptions import LoaderError
from resource_mapper.core.questionnaire_loader import (
    load_questionnaire,
    load_questionnaire_response,
    parse_questionnaire,
    parse_questionnaire_response,
)
from resource_mapper.domain.models import ItemType
from resource_mapper.fhir import (
    BooleanType,
    Coding,
    DateTimeType,
    DateType,
    DecimalType,
    IdType,
    StringType,
    UrlType,
)


def _response_with_answer(answer):
    return {
        "resourceType": "QuestionnaireResponse",
        "item": [{"linkId": "1", "answer": [answer]}],
    }


def _first_value(response):
    return response.item[0].answer[0].value


class TestParseQuestionnaire:
    """Tests for parse_questionnaire."""

    def test_items_and_context(self, patient_questionnaire_json):
        questionnaire = parse_questionnaire(patient_questionnaire_json)

        assert questionnaire.id == "client-registration"
        assert questionnaire.item_context_name_to_expression() == {"patient": "Patient"}

        group = questionnaire.item[0]
        assert group.type == ItemType.GROUP
        assert group.definition is None
        assert [child.link_id for child in group.item] == [
            "PR-name",
            "PR-birthdate",
            "PR-gender",
            "PR-marital",
            "PR-active",
            "PR-notes",
        ]
        assert group.item[0].item[0].definition_field_name == "given"

    def test_wrong_resource_type(self, patient_response_json):
        with pytest.raises(LoaderError, match="Expected resourceType Questionnaire"):
            parse_questionnaire(patient_response_json)

    def test_invalid_item(self):
        with pytest.raises(LoaderError):
            parse_questionnaire({"item": [{"linkId": "1", "required": "maybe"}]})

    def test_unknown_item_type(self):
        """An item type outside the known codes does not fail the document."""
        questionnaire = parse_questionnaire(
            {"item": [{"linkId": "1", "type": "hologram"}, {"linkId": "2"}]}
        )

        assert questionnaire.item[0].type is ItemType.OTHER
        assert questionnaire.item[1].type is ItemType.STRING


class TestParseResponse:
    """Tests for parse_questionnaire_response."""

    def test_nested_items(self, patient_response_json):
        response = parse_questionnaire_response(patient_response_json)

        group = response.item[0]
        assert group.link_id == "PR"
        assert group.answer == []
        name_group = group.item[0]
        assert [child.link_id for child in name_group.item] == [
            "PR-name-given",
            "PR-name-family",
        ]
        assert _first_value(name_group) == StringType(value="John")

    @pytest.mark.parametrize(
        "answer, expected",
        [
            ({"valueString": "Doe"}, StringType(value="Doe")),
            ({"valueDate": "1990-04-12"}, DateType(value=date(1990, 4, 12))),
            ({"valueBoolean": False}, BooleanType(value=False)),
            ({"valueDecimal": "72.5"}, DecimalType(value=Decimal("72.5"))),
            ({"valueId": "abc"}, IdType(value="abc")),
            ({"valueUri": "http://example.org"}, UrlType(value="http://example.org")),
        ],
    )
    def test_answer_types(self, answer, expected):
        """Each value[x] key maps to its own answer type."""
        value = _first_value(parse_questionnaire_response(_response_with_answer(answer)))

        assert type(value) is type(expected)
        assert value == expected

    @pytest.mark.parametrize("partial", ["1990", "1990-04"])
    def test_partial_date_answers(self, partial):
        """Year and year-month answers load with their precision."""
        value = _first_value(
            parse_questionnaire_response(_response_with_answer({"valueDate": partial}))
        )

        assert value == DateType(value=partial)
        assert str(value) == partial

    def test_partial_date_time_answer(self):
        value = _first_value(
            parse_questionnaire_response(_response_with_answer({"valueDateTime": "2021-03"}))
        )

        assert value == DateTimeType(value="2021-03")

    def test_coding_answer(self):
        response = parse_questionnaire_response(
            _response_with_answer({"valueCoding": {"code": "male", "display": "Male"}})
        )

        value = _first_value(response)
        assert isinstance(value, Coding)
        assert value.code_value == "male"
        assert value.display_value == "Male"

    def test_unsupported_answer_type(self):
        with pytest.raises(LoaderError, match="Unsupported answer type"):
            parse_questionnaire_response(
                _response_with_answer({"valueAttachment": {"url": "x"}})
            )

    def test_answer_without_value(self):
        with pytest.raises(LoaderError, match="exactly one"):
            parse_questionnaire_response(_response_with_answer({"item": []}))

    def test_unparseable_value(self):
        with pytest.raises(LoaderError, match="valueDate"):
            parse_questionnaire_response(_response_with_answer({"valueDate": "soon"}))

    def test_wrong_resource_type(self, patient_questionnaire_json):
        with pytest.raises(LoaderError):
            parse_questionnaire_response(patient_questionnaire_json)


class TestLoadFiles:
    """Tests for reading documents from disk."""

    def test_load_json(self, tmp_path, patient_questionnaire_json):
        path = tmp_path / "questionnaire.json"
        path.write_text(json.dumps(patient_questionnaire_json))

        assert load_questionnaire(path).id == "client-registration"

    def test_load_yaml(self, tmp_path, patient_response_json):
        path = tmp_path / "response.yaml"
        path.write_text(yaml.dump(patient_response_json))

        response = load_questionnaire_response(path)

        assert response.id == "client-registration-response"
        assert len(response.item[0].item) == 6

    def test_load_tab_indented_json(self, tmp_path, patient_questionnaire_json):
        path = tmp_path / "questionnaire.json"
        path.write_text(json.dumps(patient_questionnaire_json, indent="\t"))

        questionnaire = load_questionnaire(path)

        assert questionnaire.id == "client-registration"
        assert len(questionnaire.item[0].item) == 6

    def test_json_decimal_keeps_precision(self, tmp_path):
        """Decimal answers in JSON keep their written digits."""
        path = tmp_path / "response.json"
        path.write_text('{"item": [{"linkId": "1", "answer": [{"valueDecimal": 72.50}]}]}')

        value = _first_value(load_questionnaire_response(path))

        assert value == DecimalType(value=Decimal("72.50"))
        assert str(value.value) == "72.50"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_questionnaire(tmp_path / "absent.json")

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")

        with pytest.raises(LoaderError):
            load_questionnaire_response(path)

    def test_unparseable_document(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text('{"item": [')

        with pytest.raises(LoaderError):
            load_questionnaire(path)
