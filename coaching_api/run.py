from dotenv import load_dotenv

# Export .env before settings are read so uvicorn workers see the same values
load_dotenv()

import uvicorn  # noqa: E402
from coaching_api import create_app  # noqa: E402
from coaching_api.core.config import settings  # noqa: E402

# Create the FastAPI app using the create_app function
app = create_app()

if __name__ == "__main__":
    uvicorn.run("coaching_api.run:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
