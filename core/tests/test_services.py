from unittest.mock import MagicMock, patch

import requests
from botocore.exceptions import ClientError
from django.contrib.auth.models import AnonymousUser
from django.db import DatabaseError, connection
from django.test import SimpleTestCase, TestCase, override_settings

from core.models import Companion
from core.services import companions
from core.services.avatars import discard_stored_avatar, maybe_cache_remote_avatar, new_avatar_key
from core.tests.utils import companion_values, make_category, make_companion, make_user


class CompanionLookupTests(TestCase):
    def setUp(self):
        self.alice = make_user("alice")
        self.bob = make_user("bob")
        self.category = make_category()
        self.companion = make_companion(self.alice, self.category)

    def test_owner_gets_companion(self):
        self.assertEqual(companions.get_companion_for_user(self.alice, self.companion.pk), self.companion)
        self.assertEqual(companions.get_companion_for_user(self.alice, str(self.companion.pk)), self.companion)

    def test_scoped_to_owner(self):
        self.assertIsNone(companions.get_companion_for_user(self.bob, self.companion.pk))

    def test_placeholder_and_anonymous(self):
        self.assertIsNone(companions.get_companion_for_user(self.alice, "new"))
        self.assertIsNone(companions.get_companion_for_user(AnonymousUser(), self.companion.pk))

    def test_list_categories_is_alphabetical(self):
        names = list(companions.list_categories().values_list("name", flat=True))
        self.assertEqual(names, sorted(names))
        self.assertIn("Scientists (test)", names)


class CompanionSearchTests(TestCase):
    def setUp(self):
        user = make_user()
        self.scientists = make_category("Scientists (test)")
        self.games = make_category("Games (test)")
        self.einstein = make_companion(user, self.scientists, name="Albert Einstein")
        self.mario = make_companion(user, self.games, name="Mario")

    def test_no_filters_returns_all(self):
        self.assertEqual(set(companions.search_companions()), {self.einstein, self.mario})

    def test_name_is_case_insensitive_fragment(self):
        self.assertEqual(list(companions.search_companions(name="  MAR ")), [self.mario])

    def test_category_filter(self):
        self.assertEqual(list(companions.search_companions(category_id=str(self.scientists.pk))), [self.einstein])

    def test_name_and_category_combine(self):
        self.assertEqual(
            list(companions.search_companions(name="mario", category_id=self.scientists.pk)),
            [],
        )


class CompanionWriteTests(TestCase):
    def setUp(self):
        self.user = make_user()
        self.user.first_name, self.user.last_name = "Alice", "Liddell"
        self.user.save()
        self.category = make_category()

    def _fields(self, **overrides):
        fields = companion_values(self.category, **overrides)
        fields["category"] = self.category
        return fields

    def test_create_sets_owner_and_display_name(self):
        companion = companions.create_companion(self.user, **self._fields())
        self.assertEqual(companion.user, self.user)
        self.assertEqual(companion.user_name, "Alice Liddell")

    def test_update_only_touches_given_fields(self):
        companion = make_companion(self.user, self.category)
        companions.update_companion(companion, name="Renamed")
        companion.refresh_from_db()
        self.assertEqual(companion.name, "Renamed")
        self.assertEqual(companion.description, "Theoretical physicist")

    def test_avatar_is_mirrored_before_the_transaction_opens(self):
        depth = len(connection.savepoint_ids)
        seen = []

        def mirror(src):
            seen.append(len(connection.savepoint_ids))
            return src

        with patch("core.services.companions.maybe_cache_remote_avatar", side_effect=mirror):
            companions.create_companion(self.user, **self._fields())
        self.assertEqual(seen, [depth])

    @patch("core.services.companions.discard_stored_avatar")
    @patch("core.services.companions.maybe_cache_remote_avatar", return_value="/media/companion_avatars/m.png")
    def test_mirrored_avatar_is_discarded_when_save_fails(self, _mock_mirror, mock_discard):
        with patch.object(Companion, "save", side_effect=DatabaseError("db down")):
            with self.assertRaises(DatabaseError):
                companions.create_companion(self.user, **self._fields())
        mock_discard.assert_called_once_with("/media/companion_avatars/m.png")
        self.assertFalse(Companion.objects.exists())

    @patch("core.services.companions.discard_stored_avatar")
    def test_unchanged_src_is_kept_when_save_fails(self, mock_discard):
        companion = make_companion(self.user, self.category, src="/media/companion_avatars/old.png")
        with patch.object(Companion, "save", side_effect=DatabaseError("db down")):
            with self.assertRaises(DatabaseError):
                companions.update_companion(companion, src="/media/companion_avatars/old.png")
        mock_discard.assert_not_called()


class RemoteAvatarCacheTests(SimpleTestCase):
    URL = "https://cdn.example.com/people/einstein.png"

    def _storage(self):
        storage = MagicMock()
        storage.save.side_effect = lambda name, content: name
        storage.url.side_effect = lambda name: f"/media/{name}"
        return storage

    @override_settings(CACHE_REMOTE_AVATARS=False)
    def test_disabled_keeps_url(self):
        self.assertEqual(maybe_cache_remote_avatar(self.URL, storage=self._storage()), self.URL)

    @override_settings(CACHE_REMOTE_AVATARS=True, MEDIA_URL="/media/")
    @patch("core.services.avatars.requests.get")
    def test_enabled_mirrors_image(self, mock_get):
        mock_get.return_value = MagicMock(
            content=b"png-bytes", headers={"Content-Type": "image/png"}, raise_for_status=lambda: None
        )
        result = maybe_cache_remote_avatar(self.URL, storage=self._storage())
        self.assertTrue(result.startswith("/media/companion_avatars/"))
        self.assertTrue(result.endswith(".png"))

    @override_settings(CACHE_REMOTE_AVATARS=True, MEDIA_URL="/media/")
    def test_own_media_urls_are_left_alone(self):
        storage = self._storage()
        self.assertEqual(maybe_cache_remote_avatar("/media/companion_avatars/a.png", storage=storage), "/media/companion_avatars/a.png")
        storage.save.assert_not_called()

    @override_settings(CACHE_REMOTE_AVATARS=True, MEDIA_URL="/media/")
    @patch("core.services.avatars.requests.get", side_effect=requests.ConnectionError("down"))
    def test_download_failure_keeps_url(self, _mock_get):
        self.assertEqual(maybe_cache_remote_avatar(self.URL, storage=self._storage()), self.URL)

    @override_settings(CACHE_REMOTE_AVATARS=True, MEDIA_URL="/media/")
    @patch("core.services.avatars.requests.get")
    def test_non_image_response_keeps_url(self, mock_get):
        mock_get.return_value = MagicMock(
            content=b"<html>", headers={"Content-Type": "text/html"}, raise_for_status=lambda: None
        )
        self.assertEqual(maybe_cache_remote_avatar(self.URL, storage=self._storage()), self.URL)

    def _image_response(self):
        return MagicMock(content=b"png-bytes", headers={"Content-Type": "image/png"}, raise_for_status=lambda: None)

    @override_settings(CACHE_REMOTE_AVATARS=True, MEDIA_URL="/media/")
    @patch("core.services.avatars.requests.get")
    def test_storage_write_failure_keeps_url(self, mock_get):
        mock_get.return_value = self._image_response()
        storage = self._storage()
        storage.save.side_effect = OSError("disk full")
        self.assertEqual(maybe_cache_remote_avatar(self.URL, storage=storage), self.URL)

    @override_settings(CACHE_REMOTE_AVATARS=True, MEDIA_URL="/media/")
    @patch("core.services.avatars.requests.get")
    def test_s3_rejection_keeps_url(self, mock_get):
        mock_get.return_value = self._image_response()
        storage = self._storage()
        storage.save.side_effect = ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")
        self.assertEqual(maybe_cache_remote_avatar(self.URL, storage=storage), self.URL)


@override_settings(MEDIA_URL="/media/")
class DiscardAvatarTests(SimpleTestCase):
    def test_deletes_our_file(self):
        storage = MagicMock()
        discard_stored_avatar("/media/companion_avatars/a.gif", storage=storage)
        storage.delete.assert_called_once_with("companion_avatars/a.gif")

    def test_external_and_empty_urls_are_ignored(self):
        storage = MagicMock()
        discard_stored_avatar("https://img.test/einstein.png", storage=storage)
        discard_stored_avatar(None, storage=storage)
        storage.delete.assert_not_called()

    def test_delete_failure_is_logged_not_raised(self):
        storage = MagicMock()
        storage.delete.side_effect = OSError("read-only")
        with self.assertLogs("core.services.avatars", level="WARNING"):
            discard_stored_avatar("/media/companion_avatars/a.gif", storage=storage)


class AvatarKeyTests(SimpleTestCase):
    def test_extension_from_content_type_wins(self):
        self.assertTrue(new_avatar_key("photo", "image/webp").endswith(".webp"))

    def test_unknown_extension_defaults_to_jpg(self):
        key = new_avatar_key("photo.bmp")
        self.assertTrue(key.startswith("companion_avatars/"))
        self.assertTrue(key.endswith(".jpg"))
