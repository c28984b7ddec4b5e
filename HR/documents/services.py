"""
Document Service

Materializes employee documents from document templates.
"""
import logging

from django.db import transaction

from HR.documents.models import Document, DocumentTemplate

logger = logging.getLogger(__name__)


class DocumentService:
    """Service layer for employee documents"""

    OFFBOARDING_CATEGORY = 'Offboarding'

    @staticmethod
    @transaction.atomic
    def create_from_template(template: DocumentTemplate, employee, scope, category='',
                             uploaded_by=None, offboarding=None) -> Document:
        """
        Copy a template's file reference onto a new Document for the employee.

        Args:
            template: DocumentTemplate to copy
            employee: Owner of the generated document
            scope: ScopeContext the document is stamped with
            category: Document category label
            uploaded_by: User recorded as uploader (defaults to scope.user)
            offboarding: Related offboarding run (optional)

        Returns:
            Document
        """
        return Document.objects.create(
            entity_id=scope.entity_id,
            owner_employee=employee,
            uploaded_by=uploaded_by if uploaded_by is not None else scope.user,
            source_template=template,
            related_offboarding_id=getattr(offboarding, 'pk', None),
            file_url=template.file_url,
            file_name=template.file_name,
            file_size=template.file_size_bytes,
            file_type=template.file_mime_type,
            category=category,
            visibility=Document.Visibility.ADMIN,
            notes=f"Generated from template: {template.name}",
        )
