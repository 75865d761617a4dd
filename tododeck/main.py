from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from tododeck.api.errors import JsonApiError, jsonapi_error_handler, request_validation_error_handler
from tododeck.api.routes import auth, categories, todos, users
from tododeck.config.settings import settings
from tododeck.database.connection import create_tables
import logging

# Set up logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        create_tables()
        logger.info("Database tables created/verified successfully")
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    yield

# FastAPI application
app = FastAPI(
    title="Tododeck API",
    lifespan=lifespan
)

app.add_exception_handler(JsonApiError, jsonapi_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)

# Include routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(todos.router)
app.include_router(categories.router)

@app.get("/")
def read_root():
    """
    Welcome message with API information
    """
    return {
        "message": "Welcome to Tododeck API",
        "version": "1.0.0",
        "docs": "/docs",
        "redoc": "/redoc",
        "endpoints": {
            "auth": {
                "token": "POST /oauth/token"
            },
            "users": {
                "register": "POST /users"
            },
            "todos": {
                "get_todos": "GET /todos",
                "create_todo": "POST /todos",
                "get_todo": "GET /todos/{id}",
                "update_todo": "PATCH /todos/{id}",
                "delete_todo": "DELETE /todos/{id}"
            },
            "categories": {
                "get_categories": "GET /categories",
                "create_category": "POST /categories",
                "get_category": "GET /categories/{id}",
                "update_category": "PATCH /categories/{id}",
                "delete_category": "DELETE /categories/{id}"
            }
        }
    }


# Run the application
if __name__ == "__main__":
    import uvicorn
    print("Starting Tododeck API server...")
    print(f"Connecting to database at: {settings.redacted_database_url()}")
    print("API Documentation will be available at: http://127.0.0.1:8000/docs")
    uvicorn.run("tododeck.main:app", host="127.0.0.1", port=8000, reload=True)
