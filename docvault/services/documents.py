"""JSON document storage: owner-scoped CRUD, management views and public lookups."""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from docvault.core.context import CallerIdentity
from docvault.core.errors import DataIntegrityError, IdNotFoundError, NotOwnerError
from docvault.models.document import Document
from docvault.models.user import Role, User
from docvault.schemas.common import Page
from docvault.schemas.documents import (
    DocumentBasic,
    DocumentCreate,
    DocumentDetail,
    DocumentUpdate,
)
from docvault.services.access import require_caller, require_role
from docvault.services.auditing import stamp
from docvault.services.paging import PageRequest, paginate

logger = logging.getLogger(__name__)

DOCUMENT_SORT_FIELDS = {"id", "name", "path", "created_by", "created_at", "modified_at"}


def to_detail(document: Document) -> DocumentDetail:
    return DocumentDetail(
        id=document.id,
        name=document.name,
        payload=document.payload,
        path=document.path,
        created_by=document.created_by,
        modified_by=document.modified_by,
        created_at=document.created_at,
        modified_at=document.modified_at,
    )


class DocumentService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def _get(self, document_id: int) -> Document:
        document = self.db.get(Document, document_id)
        if document is None:
            raise IdNotFoundError(
                f"Document {document_id} not found",
                detail_key="exception_id_not_found_json_detail",
                detail_args=(document_id,),
            )
        return document

    def _page(self, stmt, request: PageRequest) -> Page[DocumentBasic]:
        rows, total, pages = paginate(self.db, stmt, Document, request)
        return Page[DocumentBasic](
            content=[DocumentBasic.model_validate(d) for d in rows],
            page=request.page,
            size=request.size,
            total_elements=total,
            total_pages=pages,
        )

    def _check_name_free(self, owner_id: int, name: str, exclude_id: int | None = None) -> None:
        stmt = select(Document.id).where(
            Document.created_by == owner_id,
            func.lower(Document.name) == name.lower(),
        )
        if exclude_id is not None:
            stmt = stmt.where(Document.id != exclude_id)
        if self.db.execute(stmt).first() is not None:
            raise DataIntegrityError(
                f"Document name {name!r} already used by owner {owner_id}",
                detail_key="exception_data_integrity_unique_name_json",
            )

    def _save(self, document: Document, caller: CallerIdentity) -> Document:
        stamp(document, caller.caller_id)
        self.db.add(document)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DataIntegrityError(str(e.orig)) from e
        self.db.refresh(document)
        return document

    # Public reads

    def get_by_id(self, document_id: int) -> DocumentDetail:
        return to_detail(self._get(document_id))

    def search_by_name(self, name: str, request: PageRequest) -> Page[DocumentBasic]:
        """Case-insensitive substring match on the document name; % and _ match literally."""
        stmt = select(Document).where(
            func.lower(Document.name).contains(name.lower(), autoescape=True)
        )
        return self._page(stmt, request)

    # Owner views

    def list_own(self, caller: CallerIdentity | None, request: PageRequest) -> Page[DocumentBasic]:
        caller = require_caller(caller)
        stmt = select(Document).where(Document.created_by == caller.caller_id)
        return self._page(stmt, request)

    def create(self, caller: CallerIdentity | None, body: DocumentCreate) -> int:
        caller = require_caller(caller)
        self._check_name_free(caller.caller_id, body.name)
        document = self._save(
            Document(name=body.name, payload=body.payload, path=body.path), caller
        )
        logger.info("Document created: id=%s owner=%s", document.id, caller.caller_id)
        return document.id

    def _apply_update(self, document: Document, body: DocumentUpdate, caller: CallerIdentity) -> None:
        if body.name is not None:
            self._check_name_free(document.created_by, body.name, exclude_id=document.id)
            document.name = body.name
        if body.payload is not None:
            document.payload = body.payload
        if body.path is not None:
            document.path = body.path
        self._save(document, caller)

    def update_own(self, caller: CallerIdentity | None, document_id: int, body: DocumentUpdate) -> None:
        caller = require_caller(caller)
        document = self._get(document_id)
        if document.created_by != caller.caller_id:
            raise NotOwnerError(
                f"Document {document_id} belongs to another user",
                detail_key="error_update_not_the_owner",
            )
        self._apply_update(document, body, caller)

    def delete_own(self, caller: CallerIdentity | None, document_id: int) -> None:
        caller = require_caller(caller)
        document = self._get(document_id)
        if document.created_by != caller.caller_id:
            raise NotOwnerError(
                f"Document {document_id} belongs to another user",
                detail_key="error_delete_not_the_owner",
            )
        self.db.delete(document)
        self.db.commit()
        logger.info("Document deleted: id=%s by owner=%s", document_id, caller.caller_id)

    # Management

    def list_all(self, caller: CallerIdentity | None, request: PageRequest) -> Page[DocumentBasic]:
        require_role(caller, Role.ADMIN, Role.SUPERVISOR)
        return self._page(select(Document), request)

    def list_by_owner(
        self, caller: CallerIdentity | None, user_id: int, request: PageRequest
    ) -> Page[DocumentBasic]:
        require_role(caller, Role.ADMIN, Role.SUPERVISOR)
        if self.db.get(User, user_id) is None:
            raise IdNotFoundError(
                f"User {user_id} not found",
                detail_key="exception_id_not_found_user_detail",
                detail_args=(user_id,),
            )
        stmt = select(Document).where(Document.created_by == user_id)
        return self._page(stmt, request)

    def update_any(self, caller: CallerIdentity | None, document_id: int, body: DocumentUpdate) -> None:
        caller = require_role(caller, Role.ADMIN, Role.SUPERVISOR)
        self._apply_update(self._get(document_id), body, caller)

    def delete_any(self, caller: CallerIdentity | None, document_id: int) -> None:
        caller = require_role(caller, Role.ADMIN, Role.SUPERVISOR)
        document = self._get(document_id)
        self.db.delete(document)
        self.db.commit()
        logger.info("Document deleted: id=%s by manager=%s", document_id, caller.caller_id)
