from typing import Optional
import httpx
from models.order import OrderOut
from models.user import UserOut
from utils.logger import get_logger

logger = get_logger("Factory_Client")


class FulfillmentError(Exception):
    def __init__(self, message: str, report_url: Optional[str] = None):
        super().__init__(message)
        self.report_url = report_url


class FactoryClient:
    """
    Hands a placed order to the pizza factory. The factory answers with a
    signed receipt (`jwt`) and a `reportUrl`, on failure as well as success.
    """

    def __init__(self, base_url: str, api_key: str, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    async def fulfill(self, diner: UserOut, order: OrderOut) -> dict:
        payload = {
            "diner": {"id": diner.id, "name": diner.name, "email": diner.email},
            "order": order.model_dump(mode="json"),
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        logger.info(f"Sending order {order.id} to factory")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(f"{self.base_url}/api/order", json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Factory unreachable for order {order.id}: {e}")
            raise FulfillmentError(str(e))

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if not response.is_success:
            logger.error(f"Factory rejected order {order.id} with status {response.status_code}")
            raise FulfillmentError(f"factory returned {response.status_code}", body.get("reportUrl"))

        logger.info(f"Factory accepted order {order.id}")
        return {"jwt": body.get("jwt"), "reportUrl": body.get("reportUrl")}
