from sqlmodel import Field, SQLModel


class Office(SQLModel, table=True):
    __tablename__ = "offices"

    office_id: str = Field(primary_key=True)
    name: str
