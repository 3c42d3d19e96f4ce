from pydantic import BaseModel

# Request and response bodies of the gateway API.
# Field names follow the JSON the API has always returned (camelCase where it was camelCase).

class ContentRequest(BaseModel):
    content:str

class NodeStatus(BaseModel):
    id:str|None
    status:bool
    addresses:list[str] = []

class MapResult(BaseModel):
    remotePeer:str
    status:str

class ContentResponse(BaseModel):
    node:str
    content:str

class UploadedFile(BaseModel):
    filename:str
    size:int
    data:str # content id of the file

class UploadResponse(BaseModel):
    message:str
    file:UploadedFile
    directory:str # content id of the new version of the uploads directory
