from fastapi import APIRouter

api_router = APIRouter()

from app.api.v1 import auth, capabilities, nodes, pairings

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(pairings.router, prefix="/pairings", tags=["pairings"])
api_router.include_router(nodes.router, prefix="/nodes", tags=["nodes"])
api_router.include_router(capabilities.router, prefix="/capabilities", tags=["capabilities"])

@api_router.get("/")
def root():
    return {"message": "Node pairing service"}
