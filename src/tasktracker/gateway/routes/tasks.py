"""任务 CRUD 路由

POST   /tasks:       创建任务
GET    /tasks:       任务列表
GET    /tasks/{id}:  任务详情
PUT    /tasks/{id}:  更新任务
DELETE /tasks/{id}:  删除任务

路径参数以原始字符串接收，由 TaskService 解析，
保证格式错误返回 400 incorrect_field 而不是框架默认的 422。
"""

from fastapi import APIRouter, Depends, Request

from ..deps import get_task_service
from ..services.task_service import TaskService

router = APIRouter()


@router.post("/tasks")
async def create_task(
    request: Request,
    service: TaskService = Depends(get_task_service),
):
    return await service.create_task(await request.body())


@router.get("/tasks")
async def list_tasks(service: TaskService = Depends(get_task_service)):
    return await service.list_tasks()


@router.get("/tasks/{task_id}")
async def get_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    return await service.get_task(task_id)


@router.put("/tasks/{task_id}")
async def update_task(
    task_id: str,
    request: Request,
    service: TaskService = Depends(get_task_service),
):
    return await service.update_task(task_id, await request.body())


@router.delete("/tasks/{task_id}")
async def delete_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    return await service.delete_task(task_id)
