from typing import List, Optional, Any, Dict, Literal

from pydantic import BaseModel, ConfigDict, Field


class QueryRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    query: str = ""


class TablesResponse(BaseModel):
    tables: List[str] = Field(default_factory=list)


class TablePageResponse(BaseModel):
    columns: List[str] = Field(default_factory=list)
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    total: int = 0
    limit: int
    offset: int


class ColumnModel(BaseModel):
    cid: int
    name: str
    type: str
    notnull: bool
    pk: bool
    dflt_value: Optional[str] = None


class IndexModel(BaseModel):
    name: str
    sql: str = ""


class TableIndexModel(IndexModel):
    table: str


class SchemaResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schema_sql: str = Field(alias="schema")
    columns: List[ColumnModel] = Field(default_factory=list)
    indexes: List[IndexModel] = Field(default_factory=list)


class InsertResponse(BaseModel):
    status: str = "ok"
    rowid: int


class UpdateResponse(BaseModel):
    status: str = "ok"
    updated: int


class DeleteResponse(BaseModel):
    status: str = "ok"
    deleted: int


class SelectQueryResponse(BaseModel):
    type: Literal["select"] = "select"
    columns: List[str] = Field(default_factory=list)
    rows: List[Dict[str, Any]] = Field(default_factory=list)


class WriteQueryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["write"] = "write"
    rows_affected: int = Field(0, alias="rowsAffected")
    last_insert_id: int = Field(0, alias="lastInsertId")


class IndexesResponse(BaseModel):
    indexes: List[TableIndexModel] = Field(default_factory=list)


class ViewModel(BaseModel):
    name: str
    sql: str = ""


class ViewsResponse(BaseModel):
    views: List[ViewModel] = Field(default_factory=list)
