"""
Candidate model.

Represents a job candidate (a contact of type candidate) tracked by the CRM.
The pipeline engine only reads candidates: it joins to them for display and
for free-text search.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from recruiting_crm.models.base_model import TenantScopedModel


class Candidate(TenantScopedModel):
    """
    Candidate table - represents a job seeker/candidate.
    """
    
    __tablename__ = "candidate"
    
    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    
    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    
    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    
    phone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
    
    # Current role / employer, both searchable from the pipeline view
    current_title: Mapped[Optional[str]] = mapped_column(
        String(200),
        nullable=True,
    )
    
    current_company: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    
    linkedin_url: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )
