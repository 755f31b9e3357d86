"""
Position model.

Represents a job opening that candidates apply to.
"""

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from recruiting_crm.models.base_model import TenantScopedModel


class Position(TenantScopedModel):
    """
    Position table - represents a job opening.
    
    This is the position that candidates are being recruited for.
    """
    
    __tablename__ = "position"
    
    # Job title (e.g., "Senior Software Engineer")
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    
    department: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )
    
    location: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    
    # Status: 'open', 'closed', or 'on-hold'
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="open",
    )
    
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
