# File: backend/app/api/api.py
from fastapi import APIRouter

from app.api.endpoints import (
    account,
    admin,
    admin_resources,
    auth,
    connections,
    generate,
    github_configs,
    latex,
    openai_configs,
    prompts,
    runs,
    templates,
)

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(account.router, prefix="/account", tags=["account"])
api_router.include_router(templates.router, prefix="/templates", tags=["templates"])
api_router.include_router(prompts.router, prefix="/prompts", tags=["prompts"])
api_router.include_router(github_configs.router, prefix="/github-configs", tags=["github-configs"])
api_router.include_router(openai_configs.router, prefix="/openai-configs", tags=["openai-configs"])
api_router.include_router(connections.router, tags=["connections"])
api_router.include_router(runs.router, prefix="/runs", tags=["runs"])
api_router.include_router(generate.router, prefix="/generate", tags=["generate"])
api_router.include_router(latex.router, prefix="/latex", tags=["latex"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(admin_resources.router, prefix="/admin", tags=["admin"])
