import uvicorn
from studylog.main import app

if __name__ == "__main__":
    uvicorn.run(
        "studylog.main:app",
        host="0.0.0.0",
        port=8000,
        reload=False
    )
