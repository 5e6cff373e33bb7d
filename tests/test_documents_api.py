"""Tests for JSON document routes: ownership, management and public reads."""

from docvault.core.database import SessionLocal
from docvault.models import Document, Role
from tests.support import ApiTestCase, create_principal

OWN = "/api/v1/authenticated/json"
MANAGE = "/api/v1/management/json"
PUBLIC = "/api/v1/public/json"


class DocumentApiTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.carol_id = create_principal("carol", "pass", Role.USER)
        self.dave_id = create_principal("dave", "pass", Role.USER)
        self.carol = self.bearer(self.login("carol", "pass"))
        self.dave = self.bearer(self.login("dave", "pass"))
        self.admin = self.bearer(self.login())

    def create(self, headers, name: str = "config", payload=None, path: str | None = "/app/config") -> int:
        body = {"name": name, "json": payload if payload is not None else {"debug": True}, "path": path}
        response = self.client.post(OWN, json=body, headers=headers)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()


class TestOwnDocuments(DocumentApiTestCase):
    def test_create_stamps_owner_and_reads_back(self) -> None:
        doc_id = self.create(self.carol, payload={"a": [1, 2, 3]})
        response = self.client.get(f"{OWN}/{doc_id}", headers=self.carol)
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["json"], {"a": [1, 2, 3]})
        self.assertEqual(body["created_by"], self.carol_id)
        self.assertEqual(body["modified_by"], self.carol_id)

    def test_list_own_only_shows_caller_documents(self) -> None:
        self.create(self.carol, name="one")
        self.create(self.carol, name="two")
        self.create(self.dave, name="three")
        response = self.client.get(OWN, headers=self.carol)
        self.assertEqual(response.status_code, 200, response.text)
        page = response.json()
        self.assertEqual(page["total_elements"], 2)
        # Default order is id descending.
        self.assertEqual([d["name"] for d in page["content"]], ["two", "one"])

    def test_sort_and_size_parameters(self) -> None:
        for name in ("b", "c", "a"):
            self.create(self.carol, name=name)
        response = self.client.get(OWN, params={"sort": "name,asc", "size": 2}, headers=self.carol)
        page = response.json()
        self.assertEqual([d["name"] for d in page["content"]], ["a", "b"])
        self.assertEqual(page["total_pages"], 2)

    def test_duplicate_name_per_owner_is_rejected_case_insensitively(self) -> None:
        self.create(self.carol, name="Config")
        response = self.client.post(
            OWN, json={"name": "config", "json": {"x": 1}}, headers=self.carol
        )
        body = self.assertProblem(response, 400, "Duplicated value")
        self.assertEqual(body["detail"], "You already have a JSON document with this name.")
        # Another owner may reuse the name.
        self.create(self.dave, name="config")

    def test_payload_size_is_validated(self) -> None:
        response = self.client.post(
            OWN, json={"name": "big", "json": {"k": "x" * 3000}}, headers=self.carol
        )
        self.assertProblem(response, 400, "Invalid field")

    def test_owner_updates_and_deletes(self) -> None:
        doc_id = self.create(self.carol)
        response = self.client.patch(
            f"{OWN}/{doc_id}", json={"json": {"debug": False}}, headers=self.carol
        )
        self.assertEqual(response.status_code, 204, response.text)
        self.assertEqual(self.client.get(f"{PUBLIC}/{doc_id}").json()["json"], {"debug": False})

        self.assertEqual(self.client.delete(f"{OWN}/{doc_id}", headers=self.carol).status_code, 204)
        self.assertProblem(self.client.get(f"{PUBLIC}/{doc_id}"), 404)

    def test_non_owner_cannot_modify(self) -> None:
        doc_id = self.create(self.carol)
        response = self.client.patch(f"{OWN}/{doc_id}", json={"name": "mine"}, headers=self.dave)
        body = self.assertProblem(response, 403, "Not the owner")
        self.assertEqual(body["detail"], "Only the creator of this document can update it.")
        response = self.client.delete(f"{OWN}/{doc_id}", headers=self.dave)
        self.assertProblem(response, 403, "Not the owner")

    def test_anonymous_cannot_create(self) -> None:
        response = self.client.post(OWN, json={"name": "x", "json": {"a": 1}})
        self.assertProblem(response, 401)


class TestManagementDocuments(DocumentApiTestCase):
    def test_manager_lists_all_and_by_user(self) -> None:
        self.create(self.carol, name="one")
        self.create(self.dave, name="two")
        all_docs = self.client.get(MANAGE, headers=self.admin).json()
        self.assertEqual(all_docs["total_elements"], 2)
        by_user = self.client.get(f"{MANAGE}/by-user/{self.dave_id}", headers=self.admin).json()
        self.assertEqual([d["name"] for d in by_user["content"]], ["two"])

    def test_by_unknown_user_is_not_found(self) -> None:
        response = self.client.get(f"{MANAGE}/by-user/9999", headers=self.admin)
        self.assertProblem(response, 404)

    def test_manager_updates_and_deletes_any_document(self) -> None:
        doc_id = self.create(self.carol)
        response = self.client.patch(
            f"{MANAGE}/{doc_id}", json={"path": "/moved"}, headers=self.admin
        )
        self.assertEqual(response.status_code, 204, response.text)
        with SessionLocal() as db:
            document = db.get(Document, doc_id)
            self.assertEqual(document.path, "/moved")
            self.assertEqual(document.created_by, self.carol_id)
            self.assertEqual(document.modified_by, self.admin_id)
        self.assertEqual(self.client.delete(f"{MANAGE}/{doc_id}", headers=self.admin).status_code, 204)

    def test_user_cannot_use_management_routes(self) -> None:
        self.assertProblem(self.client.get(MANAGE, headers=self.carol), 403)


class TestPublicDocuments(DocumentApiTestCase):
    def test_search_by_name_is_case_insensitive_substring(self) -> None:
        self.create(self.carol, name="Server-Config")
        self.create(self.dave, name="client")
        response = self.client.get(f"{PUBLIC}/by-name/CONFIG")
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual([d["name"] for d in response.json()["content"]], ["Server-Config"])

    def test_unknown_id_is_localized_not_found(self) -> None:
        response = self.client.get(f"{PUBLIC}/424242", headers={"Accept-Language": "pt-BR"})
        body = self.assertProblem(response, 404)
        self.assertIn("424242", body["detail"])

    def test_search_treats_like_wildcards_literally(self) -> None:
        self.create(self.carol, name="alpha")
        self.create(self.dave, name="beta")
        for text in ("%25", "_"):
            with self.subTest(text=text):
                response = self.client.get(f"{PUBLIC}/by-name/{text}")
                self.assertEqual(response.status_code, 200, response.text)
                self.assertEqual(response.json()["total_elements"], 0)

        self.create(self.carol, name="100%_done")
        response = self.client.get(f"{PUBLIC}/by-name/%25_")
        self.assertEqual([d["name"] for d in response.json()["content"]], ["100%_done"])
