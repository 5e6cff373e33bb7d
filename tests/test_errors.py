"""Tests for message catalogs and the problem-detail mapping."""

import unittest

from docvault.core import errors
from docvault.core.i18n import MESSAGES, get_message, resolve_locale


class TestResolveLocale(unittest.TestCase):
    def test_defaults_to_english(self) -> None:
        self.assertEqual(resolve_locale(None), "en")
        self.assertEqual(resolve_locale(""), "en")
        self.assertEqual(resolve_locale("fr-FR,de;q=0.8"), "en")

    def test_region_is_ignored(self) -> None:
        self.assertEqual(resolve_locale("es-PE"), "es")
        self.assertEqual(resolve_locale("pt-BR,pt;q=0.9"), "pt")

    def test_highest_quality_supported_tag_wins(self) -> None:
        self.assertEqual(resolve_locale("fr;q=1.0, pt;q=0.5, es;q=0.8"), "es")
        self.assertEqual(resolve_locale("es;q=0, pt"), "pt")


class TestMessages(unittest.TestCase):
    def test_catalogs_share_keys(self) -> None:
        english = set(MESSAGES["en"])
        for locale in ("es", "pt"):
            with self.subTest(locale=locale):
                self.assertEqual(set(MESSAGES[locale]), english)

    def test_every_error_class_key_exists(self) -> None:
        classes = [
            obj
            for obj in vars(errors).values()
            if isinstance(obj, type) and issubclass(obj, errors.AppError)
        ]
        for cls in classes:
            with self.subTest(cls=cls.__name__):
                self.assertIn(cls.title_key, MESSAGES["en"])
                if cls.detail_key:
                    self.assertIn(cls.detail_key, MESSAGES["en"])

    def test_arguments_are_formatted(self) -> None:
        self.assertEqual(
            get_message("exception_id_not_found_json_detail", "en", (42,)),
            "No JSON document exists with id 42.",
        )

    def test_unknown_locale_and_key_fall_back(self) -> None:
        self.assertEqual(
            get_message("exception_server_error", "fr"), MESSAGES["en"]["exception_server_error"]
        )
        self.assertEqual(get_message("no_such_key"), "no_such_key")


class TestErrorTaxonomy(unittest.TestCase):
    def test_status_codes(self) -> None:
        expected = {
            errors.BadCredentialsError: 401,
            errors.UserDisabledError: 401,
            errors.UserLockedError: 401,
            errors.AuthenticationRequiredError: 401,
            errors.TokenInvalidError: 403,
            errors.ForbiddenError: 403,
            errors.NotOwnerError: 403,
            errors.ForbiddenActionError: 403,
            errors.IdNotFoundError: 404,
            errors.UsernameNotFoundError: 404,
            errors.InvalidFieldValueError: 400,
            errors.DataIntegrityError: 400,
            errors.RepositoryError: 500,
            errors.TokenProcessingError: 500,
        }
        for cls, status in expected.items():
            with self.subTest(cls=cls.__name__):
                self.assertEqual(cls.status_code, status)

    def test_detail_key_override(self) -> None:
        exc = errors.ForbiddenError("x", detail_key="error_auditor_empty")
        self.assertEqual(exc.detail_key, "error_auditor_empty")
        self.assertEqual(errors.ForbiddenError.detail_key, "exception_auth_permission_error_detail")
