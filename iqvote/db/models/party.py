from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from iqvote.db.base import Base

class Party(Base):
    __tablename__ = "M_PARTY"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    arabic_name: Mapped[str] = mapped_column(String(100), nullable=False, doc="政党名（アラビア語表記）")
    abbr: Mapped[str] = mapped_column(String(16), unique=True, nullable=False, doc="略称（seed の業務キー）")
    color: Mapped[str] = mapped_column(String(16), nullable=False, doc="表示色 #rrggbb")
    number_of_voting: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    last_elec_chairs: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    this_elec_chairs: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    locations: Mapped[list["Location"]] = relationship(
        back_populates="party", cascade="all, delete-orphan", order_by="Location.id"
    )
