from sqlalchemy import ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from iqvote.db.base import Base

# 政党 × 県 の得票（1 組につき 1 行）
class Location(Base):
    __tablename__ = "T_LOCATION"
    __table_args__ = (
        UniqueConstraint("party_id", "region_code", name="uq_location_party_region"),
        Index("ix_location_region_code", "region_code"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    party_id: Mapped[int] = mapped_column(Integer, ForeignKey("M_PARTY.id"), nullable=False)
    # 常にアンダースコア形式（IQ_AR）で保存する
    region_code: Mapped[str] = mapped_column(String(8), nullable=False)
    number_of_voting: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    this_elec_chairs: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    party: Mapped["Party"] = relationship(back_populates="locations")
