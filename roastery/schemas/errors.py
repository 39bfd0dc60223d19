from pydantic import BaseModel


class ErrorBody(BaseModel):
    """Client-caused rejection, or a concurrency conflict"""
    error: str


class ExceptionBody(BaseModel):
    """The record store failed"""
    exception: str
