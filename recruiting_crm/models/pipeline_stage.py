"""
PipelineStage model.

Represents a stage in a pipeline (e.g., Applied, Phone Screen, Offer).
"""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from recruiting_crm.models.base_model import TenantScopedModel


class PipelineType:
    SALES = "sales"
    RECRUITING = "recruiting"



class PipelineStage(TenantScopedModel):
    """
    PipelineStage table - represents a step in a tenant's process.
    
    Each tenant can customize their pipeline stages.
    The order_index determines the display order; the lowest active
    recruiting stage is where new applications land by default.
    """
    
    __tablename__ = "pipeline_stage"
    
    # Unique code for this stage (e.g., "SOURCED", "INTERVIEW_1")
    code: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    
    # Human-readable name (e.g., "Sourced", "First Interview")
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    
    # Order in the pipeline (0, 1, 2, etc.)
    order_index: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    
    # Display color for the UI, e.g. "#3B82F6"
    color: Mapped[str] = mapped_column(
        String(7),
        nullable=False,
        default="#1F2937",
    )
    
    pipeline_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PipelineType.RECRUITING,
    )
    
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )
