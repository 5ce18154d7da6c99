from tests.base import ApiTestCase


class TestAuthRoutes(ApiTestCase):
    def test_register_returns_user_and_token(self):
        response = self.client.post(
            "/api/auth/register",
            json={"name": "Alice", "email": "Alice@Example.com", "password": "pass123"},
        )
        self.assertEqual(response.status_code, 201)
        body = response.get_json()
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "User registered successfully")
        self.assertEqual(body["data"]["user"]["email"], "alice@example.com")
        self.assertNotIn("password_hash", body["data"]["user"])
        self.assertTrue(body["data"]["token"])

    def test_register_rejects_duplicate_email(self):
        self._register()
        response = self.client.post(
            "/api/auth/register",
            json={"name": "Other", "email": "alice@example.com", "password": "pass123"},
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.get_json()["message"], "User already exists with this email")

    def test_register_validates_fields(self):
        cases = [
            ({"name": "A", "email": "a@example.com", "password": "pass123"}, "Name must be at least 2 characters long"),
            ({"name": "Alice", "email": "not-an-email", "password": "pass123"}, "Please provide a valid email address"),
            ({"name": "Alice", "email": "a@example.com", "password": "123"}, "Password must be at least 6 characters long"),
            ({"name": "Alice", "email": "a@example.com"}, "Password must be at least 6 characters long"),
        ]
        for payload, message in cases:
            with self.subTest(payload=payload):
                response = self.client.post("/api/auth/register", json=payload)
                self.assertEqual(response.status_code, 400)
                body = response.get_json()
                self.assertFalse(body["success"])
                self.assertEqual(body["message"], message)

    def test_register_rejects_invalid_json(self):
        response = self.client.post(
            "/api/auth/register",
            data="not-json",
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["message"], "Invalid JSON body")

    def test_login_success_and_failure(self):
        self._register()

        ok = self.client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "pass123"},
        )
        self.assertEqual(ok.status_code, 200)
        self.assertTrue(ok.get_json()["data"]["token"])

        bad = self.client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "wrong-pass"},
        )
        self.assertEqual(bad.status_code, 401)
        self.assertEqual(bad.get_json()["message"], "Invalid email or password")

        unknown = self.client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": "pass123"},
        )
        self.assertEqual(unknown.status_code, 401)

    def test_profile_requires_token(self):
        response = self.client.get("/api/auth/profile")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()["message"], "Access denied. No token provided.")

    def test_profile_rejects_expired_and_malformed_tokens(self):
        self._register()

        expired = self.client.get("/api/auth/profile", headers=self._expired_header("alice@example.com"))
        self.assertEqual(expired.status_code, 401)
        self.assertEqual(expired.get_json()["message"], "Token expired")

        malformed = self.client.get("/api/auth/profile", headers={"Authorization": "Bearer abc.def.ghi"})
        self.assertEqual(malformed.status_code, 401)
        self.assertEqual(malformed.get_json()["message"], "Invalid token")

    def test_profile_includes_stats(self):
        _, headers = self._register()
        self._create_post(headers)

        response = self.client.get("/api/auth/profile", headers=headers)
        self.assertEqual(response.status_code, 200)
        user = response.get_json()["data"]["user"]
        self.assertEqual(user["email"], "alice@example.com")
        self.assertEqual(user["stats"]["total_posts"], 1)
        self.assertEqual(user["stats"]["total_comments"], 0)
        self.assertEqual(user["stats"]["total_likes"], 0)

    def test_public_profile_hides_email(self):
        user, _ = self._register()

        response = self.client.get(f"/api/auth/user/{user['id']}")
        self.assertEqual(response.status_code, 200)
        public = response.get_json()["data"]["user"]
        self.assertEqual(public["name"], "Alice")
        self.assertNotIn("email", public)
        self.assertIn("stats", public)

        missing = self.client.get("/api/auth/user/999")
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.get_json()["message"], "User not found")

    def test_update_profile(self):
        _, headers = self._register()

        response = self.client.put(
            "/api/auth/profile",
            json={"name": "Alice B", "bio": "Writer", "avatarUrl": "http://img/a.png"},
            headers=headers,
        )
        self.assertEqual(response.status_code, 200)
        user = response.get_json()["data"]["user"]
        self.assertEqual(user["name"], "Alice B")
        self.assertEqual(user["bio"], "Writer")
        self.assertEqual(user["avatar_url"], "http://img/a.png")

        too_long = self.client.put("/api/auth/profile", json={"bio": "x" * 501}, headers=headers)
        self.assertEqual(too_long.status_code, 400)

        empty = self.client.put("/api/auth/profile", json={}, headers=headers)
        self.assertEqual(empty.status_code, 400)
        self.assertEqual(empty.get_json()["message"], "No fields to update")

    def test_change_password(self):
        _, headers = self._register()

        wrong = self.client.put(
            "/api/auth/change-password",
            json={"currentPassword": "nope123", "newPassword": "newpass1"},
            headers=headers,
        )
        self.assertEqual(wrong.status_code, 400)
        self.assertEqual(wrong.get_json()["message"], "Current password is incorrect")

        same = self.client.put(
            "/api/auth/change-password",
            json={"currentPassword": "pass123", "newPassword": "pass123"},
            headers=headers,
        )
        self.assertEqual(same.status_code, 400)

        ok = self.client.put(
            "/api/auth/change-password",
            json={"currentPassword": "pass123", "newPassword": "newpass1"},
            headers=headers,
        )
        self.assertEqual(ok.status_code, 200)

        login = self.client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "newpass1"},
        )
        self.assertEqual(login.status_code, 200)

    def test_delete_account_removes_user_content(self):
        _, headers = self._register()
        _, bob_headers = self._register("Bob", "bob@example.com")
        post = self._create_post(headers)
        self.client.post(
            f"/api/comments/post/{post['id']}",
            json={"content": "Nice"},
            headers=bob_headers,
        )

        wrong = self.client.delete("/api/auth/account", json={"password": "bad-pass"}, headers=headers)
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(wrong.get_json()["message"], "Invalid password")

        ok = self.client.delete("/api/auth/account", json={"password": "pass123"}, headers=headers)
        self.assertEqual(ok.status_code, 200)

        self.assertEqual(self.client.get(f"/api/posts/{post['id']}").status_code, 404)
        self.assertEqual(self.client.get(f"/api/comments/post/{post['id']}").status_code, 404)

        stale = self.client.get("/api/auth/profile", headers=headers)
        self.assertEqual(stale.status_code, 401)
        self.assertEqual(stale.get_json()["message"], "Token is valid but user no longer exists")
