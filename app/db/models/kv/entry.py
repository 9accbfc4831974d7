# app/db/models/kv/entry.py
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, LargeBinary


class KeyValueEntry(SQLModel, table=True):
    __tablename__ = "kv_entries"
    key: bytes = Field(sa_column=Column(LargeBinary, primary_key=True))
    value: bytes = Field(sa_column=Column(LargeBinary, nullable=False))
