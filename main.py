import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Query, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr
from pymongo.errors import PyMongoError

import accounts
import catalog
import orders
from accounts import CredentialVerifier, get_verifier
from cart import CartService
from config import settings
from database import ensure_indexes, get_db
from errors import ShopError
from schemas import OrderItem, User

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.app_name}...")
    try:
        ensure_indexes()
    except (ShopError, PyMongoError) as e:
        logger.error(f"Failed to prepare database: {e}")
        raise
    yield
    logger.info(f"{settings.app_name} shut down")


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error handlers
@app.exception_handler(ShopError)
async def shop_error_handler(request, exc: ShopError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request, exc: RequestValidationError):
    problems = [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Invalid request", "detail": problems})


@app.exception_handler(PyMongoError)
async def store_error_handler(request, exc: PyMongoError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Server error"})


# Helpers
class AddToCart(BaseModel):
    userId: str
    itemId: str


class CartItemUpdate(BaseModel):
    qty: int
    itemName: Optional[str] = None
    itemId: Optional[str] = None


class CartItemDelete(BaseModel):
    itemName: Optional[str] = None
    itemId: Optional[str] = None


class CreateOrder(BaseModel):
    userId: str
    items: List[OrderItem]
    totalPrice: float


class UserLogin(BaseModel):
    email: EmailStr
    password: str


# Health
@app.get("/")
def read_root():
    return {"message": "Storefront backend running"}


@app.get("/health")
def health():
    try:
        get_db().command("ping")
        db_status = "connected"
    except (ShopError, PyMongoError) as e:
        logger.error(f"Database check failed: {e}")
        db_status = "disconnected"
    return {"status": "ok", "service": settings.app_name, "database": db_status}


# Catalog
@app.get("/items")
def list_items(
    start: int = Query(0, ge=0),
    limit: int = Query(0, ge=0),
    category: str = "",
):
    return catalog.list_items(start=start, limit=limit, category=category)


# Cart
@app.get("/cart/{user_id}")
def get_cart(user_id: str):
    return CartService().get_cart_items(user_id)


@app.post("/add-to-cart")
def add_to_cart(payload: AddToCart, response: Response):
    cart, created = CartService().add_item(payload.userId, payload.itemId)
    if created:
        response.status_code = 201
    return cart


@app.put("/updateCartItem/{user_id}")
def update_cart_item(user_id: str, payload: CartItemUpdate):
    CartService().update_item(user_id, payload.qty, item_name=payload.itemName, item_id=payload.itemId)
    return {"message": "Item quantity updated successfully"}


@app.delete("/deleteCartItem/{user_id}")
def delete_cart_item(user_id: str, payload: CartItemDelete):
    CartService().delete_item(user_id, item_name=payload.itemName, item_id=payload.itemId)
    key = payload.itemId if payload.itemId is not None else payload.itemName
    return {"message": f'Item "{key}" deleted successfully'}


@app.delete("/clearCart/{user_id}")
def clear_cart(user_id: str):
    CartService().clear(user_id)
    return {"message": "Cart cleared successfully"}


# Orders
@app.post("/createOrder")
def create_order(payload: CreateOrder):
    return orders.create_order(payload.userId, payload.items, payload.totalPrice)


# Accounts
@app.post("/login")
def login(creds: UserLogin, verifier: CredentialVerifier = Depends(get_verifier)):
    user = accounts.login(creds.email, creds.password, verifier)
    return {"message": "Login successful", "user": user}


@app.post("/signup", status_code=201)
def signup(user: User, verifier: CredentialVerifier = Depends(get_verifier)):
    return accounts.signup(user, verifier)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=settings.debug)
