import uvicorn

from enrolment_webhooks.config import settings

if __name__ == "__main__":
    uvicorn.run("enrolment_webhooks.main:app", host=settings.host, port=settings.port, reload=settings.debug)
