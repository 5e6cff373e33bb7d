"""JSON document routes: caller-owned, management and public views."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from docvault.api.deps import Caller, get_document_service, page_params
from docvault.schemas.common import Page
from docvault.schemas.documents import (
    DocumentBasic,
    DocumentCreate,
    DocumentDetail,
    DocumentUpdate,
)
from docvault.services.documents import DOCUMENT_SORT_FIELDS, DocumentService
from docvault.services.paging import PageRequest

authenticated_router = APIRouter()
management_router = APIRouter()
public_router = APIRouter()

Documents = Annotated[DocumentService, Depends(get_document_service)]
Paging = Annotated[PageRequest, Depends(page_params(DOCUMENT_SORT_FIELDS))]


# Owner


@authenticated_router.get("", response_model=Page[DocumentBasic])
def list_own_documents(caller: Caller, documents: Documents, paging: Paging) -> Page[DocumentBasic]:
    return documents.list_own(caller, paging)


@authenticated_router.post("", status_code=status.HTTP_201_CREATED, response_model=int)
def create_document(body: DocumentCreate, caller: Caller, documents: Documents) -> int:
    """Store a JSON document owned by the caller; names are unique per owner."""
    return documents.create(caller, body)


@authenticated_router.get("/{document_id}", response_model=DocumentDetail)
def get_own_document(document_id: int, documents: Documents) -> DocumentDetail:
    return documents.get_by_id(document_id)


@authenticated_router.patch("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_own_document(
    document_id: int, body: DocumentUpdate, caller: Caller, documents: Documents
) -> Response:
    documents.update_own(caller, document_id, body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@authenticated_router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_own_document(document_id: int, caller: Caller, documents: Documents) -> Response:
    documents.delete_own(caller, document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Management


@management_router.get("", response_model=Page[DocumentBasic])
def list_all_documents(caller: Caller, documents: Documents, paging: Paging) -> Page[DocumentBasic]:
    return documents.list_all(caller, paging)


@management_router.get("/by-user/{user_id}", response_model=Page[DocumentBasic])
def list_documents_by_user(
    user_id: int, caller: Caller, documents: Documents, paging: Paging
) -> Page[DocumentBasic]:
    return documents.list_by_owner(caller, user_id, paging)


@management_router.get("/{document_id}", response_model=DocumentDetail)
def get_any_document(document_id: int, documents: Documents) -> DocumentDetail:
    return documents.get_by_id(document_id)


@management_router.patch("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_any_document(
    document_id: int, body: DocumentUpdate, caller: Caller, documents: Documents
) -> Response:
    documents.update_any(caller, document_id, body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@management_router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_any_document(document_id: int, caller: Caller, documents: Documents) -> Response:
    documents.delete_any(caller, document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Public


@public_router.get("/by-name/{name}", response_model=Page[DocumentBasic])
def search_documents(name: str, documents: Documents, paging: Paging) -> Page[DocumentBasic]:
    """Documents whose name contains the given text (case-insensitive)."""
    return documents.search_by_name(name, paging)


@public_router.get("/{document_id}", response_model=DocumentDetail)
def get_public_document(document_id: int, documents: Documents) -> DocumentDetail:
    return documents.get_by_id(document_id)
