# Entry point: uvicorn main:app
from cardbox.main import create_app

app = create_app()
