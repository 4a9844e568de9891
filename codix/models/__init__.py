"""Модели базы данных."""
from codix.models.admin import Admin
from codix.models.client import Client
from codix.models.blog import Blog, blog_likes
from codix.models.service import Service, Pricing
from codix.models.contact import Contact
from codix.models.career import Career
from codix.models.client_service_request import ClientServiceRequest, ServiceRequestAttachment

__all__ = [
    "Admin",
    "Client",
    "Blog",
    "blog_likes",
    "Service",
    "Pricing",
    "Contact",
    "Career",
    "ClientServiceRequest",
    "ServiceRequestAttachment",
]
