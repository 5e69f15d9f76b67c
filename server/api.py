"""FastAPI server exposing wardrobe and outfit endpoints to the mobile client."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from models.identifiers import InvalidIdentifierError
from services.outfit_service import OutfitService, OutfitValidationError
from services.wardrobe_service import DEFAULT_IMPORT_SIZE, UnsupportedProductURLError, WardrobeService
from smartfit_app.config import AppConfig
from smartfit_app.logging_config import configure_logging, get_logger

LOGGER = get_logger(__name__)


class _ClientModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class WardrobeItemRequest(_ClientModel):
    """Request payload for manually adding a wardrobe item."""

    user_id: Optional[str] = Field(None, alias="userId")
    category: Optional[str] = None
    name: Optional[str] = None
    color: Optional[str] = None
    size: Optional[str] = None
    price: float = Field(0, ge=0)
    brand: Optional[str] = None
    material: Optional[str] = None
    description: Optional[str] = None
    image_data: Optional[str] = None
    item_url: Optional[str] = None


class ImportUrlRequest(_ClientModel):
    """Request payload for importing an item from a retailer product page."""

    user_id: Optional[str] = Field(None, alias="userId")
    product_url: Optional[str] = Field(None, alias="productUrl")
    size: str = DEFAULT_IMPORT_SIZE


def create_app(
    config: AppConfig | None = None,
    wardrobe_service: WardrobeService | None = None,
    outfit_service: OutfitService | None = None,
) -> FastAPI:
    """Build the ASGI app; services default to stores described by ``config``."""

    config = config or AppConfig.from_env()
    configure_logging(config.log_level)
    wardrobe = wardrobe_service or WardrobeService.from_config(config)
    outfits = outfit_service or OutfitService.from_config(config)

    app = FastAPI(title="SmartFit", version="0.1.0")

    @app.exception_handler(HTTPException)
    async def http_error(_: Request, exc: HTTPException) -> JSONResponse:
        content = exc.detail if isinstance(exc.detail, dict) else {"message": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.get("/healthz")
    async def healthcheck() -> dict:
        """Lightweight readiness probe."""

        return {
            "status": "ok",
            "service": "smartfit",
            "environment": config.environment or "local",
        }

    @app.get("/api/test")
    async def api_test() -> dict:
        return {"message": "API is working!"}

    @app.get("/api/wardrobe")
    def list_items(userId: Optional[str] = None, category: Optional[str] = None) -> dict:
        try:
            items = wardrobe.list_items(userId or "", category=category)
        except InvalidIdentifierError:
            raise HTTPException(status_code=400, detail="Require valid userID")
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        return {"data": [item.to_dict() for item in items]}

    @app.post("/api/wardrobe", status_code=201)
    def create_item(request: WardrobeItemRequest) -> dict:
        payload = request.model_dump(exclude={"user_id"}, exclude_none=True)
        try:
            item = wardrobe.add_item(request.user_id or "", payload)
        except InvalidIdentifierError:
            raise HTTPException(status_code=400, detail="User id not valid. Try again")
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        return {"data": item.to_dict()}

    @app.put("/api/wardrobe/{item_id}")
    def update_item(item_id: str, updates: Dict[str, Any] = Body(...)) -> dict:
        try:
            item = wardrobe.update_item(item_id, updates)
        except InvalidIdentifierError:
            raise HTTPException(
                status_code=400, detail="You have provided an invalid clothing ID. Try again"
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        if item is None:
            raise HTTPException(status_code=404, detail=f"Clothing item not found: {item_id}")
        return {"message": f"You have updated clothing item id: {item_id}", "data": item.to_dict()}

    @app.delete("/api/wardrobe/{item_id}")
    def delete_item(item_id: str) -> dict:
        if not wardrobe.delete_item(item_id):
            raise HTTPException(status_code=400, detail="Clothing item is not found given the Id")
        return {"success": True}

    @app.post("/api/wardrobe/import-url", status_code=201)
    def import_from_url(request: ImportUrlRequest) -> dict:
        try:
            item, scraped = wardrobe.import_from_url(
                request.user_id or "", request.product_url or "", size=request.size
            )
        except InvalidIdentifierError:
            raise HTTPException(status_code=400, detail="Valid user ID required")
        except UnsupportedProductURLError:
            raise HTTPException(status_code=400, detail="Valid product URL required")
        except Exception as exc:
            LOGGER.exception("Import failed", extra={"url": request.product_url})
            raise HTTPException(status_code=500, detail=f"Import failed: {exc}")
        return {"data": item.to_dict(), "scraped": scraped}

    @app.get("/api/user/{user_id}/outfits")
    def get_outfits(user_id: str) -> dict:
        try:
            return {"outfits": outfits.get_outfits(user_id)}
        except OutfitValidationError as exc:
            raise HTTPException(
                status_code=400, detail={"message": "Validation failed", "errors": exc.errors}
            )

    @app.patch("/api/user/{user_id}/{outfit_number}/{category}/{item_id}")
    def update_outfit(user_id: str, outfit_number: str, category: str, item_id: str) -> dict:
        try:
            outfit = outfits.equip(user_id, outfit_number, category, item_id)
        except OutfitValidationError as exc:
            raise HTTPException(
                status_code=400, detail={"message": "Validation failed", "errors": exc.errors}
            )
        return {"message": "Outfit updated successfully", "outfit": outfit}

    @app.delete("/api/user/{user_id}/{outfit_number}/{category}")
    def unequip_outfit_item(user_id: str, outfit_number: str, category: str) -> dict:
        try:
            outfit = outfits.unequip(user_id, outfit_number, category)
        except OutfitValidationError as exc:
            raise HTTPException(
                status_code=400, detail={"message": "Validation failed", "errors": exc.errors}
            )
        return {"message": "Outfit updated successfully", "outfit": outfit}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:create_app", factory=True, host="0.0.0.0", port=8080, reload=False)
