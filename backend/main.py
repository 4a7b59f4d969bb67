import time

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routers.onset import router as onset_router

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request, call_next):
    start = time.time()
    print(f"[api] {request.method} {request.url.path} started")
    response = await call_next(request)
    elapsed = time.time() - start
    print(f"[api] {request.method} {request.url.path} completed — {response.status_code} ({elapsed:.2f}s)")
    return response


app.include_router(onset_router)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
