import json
from unittest.mock import MagicMock, patch

from datematch.llm.config import PitchConfig
from datematch.llm.groq_client import _build_user_message, describe_plans

SAMPLE_PLANS = [
    {"id": "simple_dinner_date", "title": "Dinner Date", "budget": "$$", "venues": ["Luna Trattoria"]},
    {"id": "date_picnic_in_park", "title": "Picnic in the Park", "budget": "$", "venues": ["Riverside Park"]},
    {"id": "home_game_night", "title": "Game Night", "budget": "$", "venues": []},
]

SAMPLE_PREFERENCES = {
    "budget": "$$",
    "duration": "quick",
    "love_languages": ["quality time"],
    "interests": ["food"],
}

ENABLED_CONFIG = PitchConfig(api_key="test-key", enabled=True)
DISABLED_CONFIG = PitchConfig(api_key="test-key", enabled=False)


def _mock_groq_response(content: str) -> MagicMock:
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


@patch("datematch.llm.groq_client.Groq")
def test_describe_plans_returns_reasons(mock_groq_cls):
    llm_response = json.dumps({
        "plans": [
            {"id": "simple_dinner_date", "reason": "A cozy table for two close to home."},
            {"id": "date_picnic_in_park", "reason": "Sunshine and snacks, no reservations needed."},
        ]
    })
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(llm_response)

    result = describe_plans(SAMPLE_PREFERENCES, SAMPLE_PLANS, config=ENABLED_CONFIG)

    assert result == {
        "simple_dinner_date": "A cozy table for two close to home.",
        "date_picnic_in_park": "Sunshine and snacks, no reservations needed.",
    }


@patch("datematch.llm.groq_client.Groq")
def test_describe_plans_ignores_unknown_ids(mock_groq_cls):
    llm_response = json.dumps({
        "plans": [
            {"id": "made_up_plan", "reason": "Invented."},
            {"id": "home_game_night", "reason": ""},
            {"id": "simple_dinner_date", "reason": "Great food."},
        ]
    })
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(llm_response)

    result = describe_plans(SAMPLE_PREFERENCES, SAMPLE_PLANS, config=ENABLED_CONFIG)

    assert result == {"simple_dinner_date": "Great food."}


@patch("datematch.llm.groq_client.Groq")
def test_describe_plans_fallback_on_api_error(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.side_effect = Exception("API timeout")

    assert describe_plans(SAMPLE_PREFERENCES, SAMPLE_PLANS, config=ENABLED_CONFIG) == {}


@patch("datematch.llm.groq_client.Groq")
def test_describe_plans_fallback_on_bad_json(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response("not json")

    assert describe_plans(SAMPLE_PREFERENCES, SAMPLE_PLANS, config=ENABLED_CONFIG) == {}


@patch("datematch.llm.groq_client.Groq")
def test_describe_plans_disabled_skips_api(mock_groq_cls):
    result = describe_plans(SAMPLE_PREFERENCES, SAMPLE_PLANS, config=DISABLED_CONFIG)

    assert result == {}
    mock_groq_cls.assert_not_called()


@patch("datematch.llm.groq_client.Groq")
def test_describe_plans_without_key_skips_api(mock_groq_cls):
    result = describe_plans(SAMPLE_PREFERENCES, SAMPLE_PLANS, config=PitchConfig(api_key="", enabled=True))

    assert result == {}
    mock_groq_cls.assert_not_called()


@patch("datematch.llm.groq_client.Groq")
def test_describe_plans_empty_plans(mock_groq_cls):
    assert describe_plans(SAMPLE_PREFERENCES, [], config=ENABLED_CONFIG) == {}
    mock_groq_cls.assert_not_called()


def test_build_user_message_lists_preferences_and_plans():
    message = _build_user_message(SAMPLE_PREFERENCES, SAMPLE_PLANS)

    assert "- Budget: $$" in message
    assert "- Love languages: quality time" in message
    assert "| simple_dinner_date | Dinner Date | $$ | Luna Trattoria |" in message
    assert "| home_game_night | Game Night | $ | at home |" in message


@patch("datematch.llm.groq_client.Groq")
def test_long_pitches_are_clipped(mock_groq_cls):
    long_reason = "A slow dinner with candles and " + "plenty of pasta " * 30
    llm_response = json.dumps({"plans": [{"id": "simple_dinner_date", "reason": long_reason}]})
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(llm_response)

    config = PitchConfig(api_key="test-key", enabled=True, max_reason_chars=60)
    result = describe_plans(SAMPLE_PREFERENCES, SAMPLE_PLANS, config=config)

    pitch = result["simple_dinner_date"]
    assert pitch.startswith("A slow dinner with candles")
    assert pitch.endswith("...")
    assert len(pitch) <= 63
