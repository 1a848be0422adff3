import pytest

from app.services.intent import (
    ResponseMode,
    decide_response_mode,
    is_image_request,
    matches_design_intent,
)


@pytest.mark.parametrize(
    "text",
    ["Photo please", "une IMAGE de la cuisine", "Un aperçu du dressing", "draw me a drawing"],
)
def test_image_request_keywords(text):
    assert is_image_request(text) is True


@pytest.mark.parametrize("text", ["budget and delays", "", None])
def test_not_an_image_request(text):
    assert is_image_request(text) is False


def test_design_intent_is_case_insensitive():
    assert matches_design_intent("Quel AGENCEMENT pour ce salon ?")
    assert matches_design_intent("Un meuble TV en noyer")
    assert matches_design_intent("some décor ideas")
    assert not matches_design_intent("Combien de temps pour la livraison ?")


def test_analysis_wins_when_image_and_design_intent():
    mode = decide_response_mode(has_image=True, design_intent=True, image_request=True)
    assert mode is ResponseMode.IMAGE_ANALYZE


def test_image_without_design_intent_falls_back_to_generation_or_text():
    assert (
        decide_response_mode(has_image=True, design_intent=False, image_request=True)
        is ResponseMode.IMAGE_GENERATE
    )
    assert (
        decide_response_mode(has_image=True, design_intent=False, image_request=False)
        is ResponseMode.TEXT_ONLY
    )


def test_design_intent_without_image_is_not_analysis():
    mode = decide_response_mode(has_image=False, design_intent=True, image_request=False)
    assert mode is ResponseMode.TEXT_ONLY


def test_disabled_image_features_always_text():
    mode = decide_response_mode(
        has_image=True,
        design_intent=True,
        image_request=True,
        image_features_enabled=False,
    )
    assert mode is ResponseMode.TEXT_ONLY
