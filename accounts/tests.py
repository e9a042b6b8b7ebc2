from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

User = get_user_model()


class SignUpTests(TestCase):
    def test_sign_up_page_renders(self):
        resp = self.client.get(reverse("accounts:sign_up"))
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "Create your account")

    def test_sign_up_creates_account_and_signs_in(self):
        resp = self.client.post(
            reverse("accounts:sign_up"),
            {
                "username": "newbie",
                "password1": "Tr1cky-companion-pass",
                "password2": "Tr1cky-companion-pass",
            },
        )
        self.assertRedirects(resp, reverse("core:home"))
        user = User.objects.get(username="newbie")
        self.assertEqual(int(self.client.session["_auth_user_id"]), user.pk)

    def test_mismatched_passwords_stay_on_page(self):
        resp = self.client.post(
            reverse("accounts:sign_up"),
            {"username": "newbie", "password1": "Tr1cky-companion-pass", "password2": "nope"},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(User.objects.filter(username="newbie").exists())

    def test_signed_in_users_are_sent_home(self):
        User.objects.create_user(username="alice", password="pass12345")
        self.client.login(username="alice", password="pass12345")
        resp = self.client.get(reverse("accounts:sign_up"))
        self.assertRedirects(resp, reverse("core:home"))


class SignInPageTests(TestCase):
    def test_login_page_renders(self):
        resp = self.client.get(reverse("login"))
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "Sign in")
