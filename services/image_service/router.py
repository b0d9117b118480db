from pathlib import Path

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse

router = APIRouter()

@router.get("/images/{file_name}", include_in_schema=False)
async def get_image(file_name: str, request: Request):
    images_dir = Path(request.app.state.settings.images_dir).resolve()
    file_path = (images_dir / file_name).resolve()
    # Reject anything that escapes the images directory
    if file_path.parent != images_dir or not file_path.is_file():
        raise HTTPException(status_code=404, detail="Image file does not exist")
    return FileResponse(file_path)
