"""Unit tests for localization."""

from flow_editor.config import ActionType, AssetType, Operator
from flow_editor.forms.translation import TranslationForm
from flow_editor.localization import (
    LOCALIZABLE_KEYS,
    LocalizationUpdate,
    get_localizable_keys,
    get_localization,
    get_translatable_keys,
    has_missing_localization,
    missing_localized_keys,
    update_localizations,
)
from flow_editor.models import Action, Asset, Case, Exit


class TestLocalizedObject:
    """Tests for resolving localized views."""

    def test_without_overrides(self):
        """Test an empty map gives the base object back."""
        base = {"uuid": "a1", "text": "Hello"}

        localized = get_localization(base, {}, "spa")

        assert localized.is_localized() is False
        assert localized.get_object() == base
        assert localized.get_language() == "spa"

    def test_object_is_a_copy(self):
        """Test changing the resolved object leaves the base alone."""
        base = {"uuid": "a1", "text": "Hello"}
        action = Action(uuid="a2", type=ActionType.SEND_MSG, params={"text": "Hello"})

        plain = get_localization(base, {}, "spa").get_object()
        plain["text"] = "Changed"
        resolved = get_localization(action, None, "spa").get_object()
        resolved.params["text"] = "Changed"

        assert plain is not base
        assert base["text"] == "Hello"
        assert action.params["text"] == "Hello"

    def test_with_overrides(self):
        """Test overrides replace the translated keys only."""
        base = {"uuid": "a1", "text": "Hello", "quick_replies": ["Yes"]}

        localized = get_localization(base, {"es": {"a1": {"text": "Hola"}}}, "es")

        assert localized.is_localized() is True
        assert localized.get_object()["text"] == "Hola"
        assert localized.get_object()["quick_replies"] == ["Yes"]
        assert base["text"] == "Hello"

    def test_action_overrides(self):
        """Test domain objects are rebuilt with their overrides."""
        action = Action(uuid="a1", type=ActionType.SEND_MSG, params={"text": "Hello"})

        localized = get_localization(action, {"spa": {"a1": {"text": "Hola"}}}, "spa")

        translated = localized.get_object()
        assert isinstance(translated, Action)
        assert translated.get("text") == "Hola"
        assert action.get("text") == "Hello"

    def test_language_asset(self):
        """Test a language asset selects its language."""
        red_exit = Exit(uuid="e1", name="Red")
        spanish = Asset(id="spa", name="Spanish", type=AssetType.LANGUAGE)

        localized = get_localization(red_exit, {"spa": {"e1": {"name": "Rojo"}}}, spanish)

        assert localized.get_object().name == "Rojo"

    def test_other_language_bucket_ignored(self):
        """Test translations for other languages don't leak in."""
        base = {"uuid": "a1", "text": "Hello"}

        localized = get_localization(base, {"fra": {"a1": {"text": "Bonjour"}}}, "spa")

        assert localized.is_localized() is False


class TestLocalizableKeys:
    """Tests for localizable keys and missing translations."""

    def test_keys_per_kind(self):
        """Test each object kind declares its translatable keys."""
        assert LOCALIZABLE_KEYS[ActionType.SEND_MSG] == ("text", "quick_replies")
        assert get_localizable_keys(Case(uuid="c1", type=Operator.HAS_ANY_WORD)) == ("arguments",)
        assert get_localizable_keys(Exit(uuid="e1")) == ("name",)
        assert get_localizable_keys(Action(uuid="a1", type=ActionType.SET_RUN_RESULT)) == ()

    def test_missing_keys(self):
        """Test missing keys are those without a translation."""
        base = {"uuid": "a1", "text": "Hello"}
        partial = get_localization(base, {"spa": {"a1": {"text": "Hola"}}}, "spa")
        empty = get_localization(base, {}, "spa")

        assert missing_localized_keys(("text", "quick_replies"), partial) == ["quick_replies"]
        assert missing_localized_keys(("text", "quick_replies"), empty) == ["text", "quick_replies"]

    def test_has_missing_localization(self):
        """Test only localizable objects can be missing translations."""
        action = Action(uuid="a1", type=ActionType.SEND_BROADCAST, params={"text": "Hello"})
        result = Action(uuid="a2", type=ActionType.SET_RUN_RESULT, params={"name": "Color"})
        localization = {"spa": {"a1": {"text": "Hola"}}}

        assert has_missing_localization(action, localization, "spa") is False
        assert has_missing_localization(action, localization, "fra") is True
        assert has_missing_localization(result, localization, "fra") is False

    def test_text_only_message_is_translated(self):
        """Test a message without quick replies only needs its text translated."""
        action = Action(uuid="a1", type=ActionType.SEND_MSG, params={"text": "Thanks!"})
        with_replies = Action(uuid="a2", type=ActionType.SEND_MSG, params={"text": "Color?", "quick_replies": ["Red"]})
        localization = {"spa": {"a1": {"text": "Gracias"}, "a2": {"text": "¿Color?"}}}

        assert get_translatable_keys(action) == ("text",)
        assert has_missing_localization(action, localization, "spa") is False
        assert has_missing_localization(with_replies, localization, "spa") is True

    def test_empty_base_values_need_no_translation(self):
        """Test unnamed exits and blank messages are never missing translations."""
        assert get_translatable_keys(Exit(uuid="e1")) == ()
        assert get_translatable_keys(Case(uuid="c1", type=Operator.HAS_TEXT)) == ()
        assert has_missing_localization(Exit(uuid="e1"), {}, "spa") is False


class TestUpdateLocalizations:
    """Tests for producing updated localization maps."""

    def test_adds_translations(self):
        """Test updates land in the language's bucket without touching the input."""
        original = {"spa": {"a1": {"text": "Hola"}}}

        updated = update_localizations(original, "fra", [LocalizationUpdate("a1", {"text": "Bonjour"})])

        assert updated == {"spa": {"a1": {"text": "Hola"}}, "fra": {"a1": {"text": "Bonjour"}}}
        assert "fra" not in original

    def test_empty_translations_remove(self):
        """Test clearing translations drops the object's bucket."""
        original = {"spa": {"a1": {"text": "Hola"}, "a2": {"text": "Adiós"}}}

        updated = update_localizations(original, "spa", [LocalizationUpdate("a1", None)])

        assert updated == {"spa": {"a2": {"text": "Adiós"}}}
        assert "a1" in original["spa"]


class TestTranslationForm:
    """Tests for the translation form."""

    def test_save_translation(self):
        """Test saving produces an update with only filled keys."""
        action = Action(uuid="a1", type=ActionType.SEND_MSG, params={"text": "Hello"})
        form = TranslationForm(get_localization(action, {}, "spa"))

        assert form.get_base_value("text") == "Hello"
        form.handle_translation_changed("text", "Hola")

        assert form.missing_keys() == []
        assert form.save() == LocalizationUpdate(uuid="a1", translations={"text": "Hola"})

    def test_quick_replies_need_translating(self):
        """Test quick replies count as missing once the message has some."""
        action = Action(uuid="a1", type=ActionType.SEND_MSG, params={"text": "Color?", "quick_replies": ["Red"]})
        form = TranslationForm(get_localization(action, {}, "spa"))

        form.handle_translation_changed("text", "¿Color?")
        assert form.missing_keys() == ["quick_replies"]

        form.handle_translation_changed("quick_replies", ["Rojo"])
        assert form.missing_keys() == []

    def test_existing_translations_prefill(self):
        """Test the form starts from the current translations."""
        red_exit = Exit(uuid="e1", name="Red")
        form = TranslationForm(get_localization(red_exit, {"spa": {"e1": {"name": "Rojo"}}}, "spa"))

        assert form.state.name.value == "Rojo"

    def test_clearing_all_translations(self):
        """Test blanking every key clears the object's translations."""
        red_exit = Exit(uuid="e1", name="Red")
        form = TranslationForm(get_localization(red_exit, {"spa": {"e1": {"name": "Rojo"}}}, "spa"))

        form.handle_translation_changed("name", "")
        update = form.save()

        assert update == LocalizationUpdate(uuid="e1", translations=None)
        assert update_localizations({"spa": {"e1": {"name": "Rojo"}}}, "spa", [update]) == {"spa": {}}
