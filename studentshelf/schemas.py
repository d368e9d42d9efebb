# studentshelf/schemas.py
from pydantic import BaseModel
from typing import List

class Listing(BaseModel):
    # field order is the order written to the collection file
    id: int
    studentName: str
    schoolName: str
    className: str
    classRoom: str
    bookName: str
    medium: str
    price: str
    phoneNumber: str = ""
    bookDescription: str
    additionalMessages: str = ""
    photos: List[str] = []
    date: str

class ListingCreated(BaseModel):
    success: bool = True
    message: str = "Book posted successfully!"
    id: int

class Failure(BaseModel):
    success: bool = False
    message: str

class LoadError(BaseModel):
    error: str
