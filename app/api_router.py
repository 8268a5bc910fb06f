"""
File: app/api_router.py
Description: 根 API 路由聚合层

本模块负责：
1. 聚合所有业务领域的 Router (auth, users)
2. 统一设置路由前缀与 OpenAPI 标签

Author: jinmozhe
Created: 2025-12-05
Updated: 2026-10-17
"""

from fastapi import APIRouter

from app.domains.auth.router import router as auth_router
from app.domains.users.router import router as users_router

api_router = APIRouter()

# 1. 账号流程 (登录 / 注册 / 绑定)
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])

# 2. 用户资料
api_router.include_router(users_router, prefix="/users", tags=["users"])
