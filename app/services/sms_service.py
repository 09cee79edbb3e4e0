"""
app/services/sms_service.py

Purpose: OTP SMS delivery

- Sends plain SMS via the Twilio Messages API
- Prefixes 10-digit account numbers with the configured country code
- Reports delivery outcome; callers decide how to fail
"""

import httpx
from typing import Dict, Any
from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class SmsService:
    """Service for sending SMS via Twilio"""

    def __init__(self):
        self.account_sid = settings.TWILIO_ACCOUNT_SID
        self.auth_token = settings.TWILIO_AUTH_TOKEN
        self.sender_number = settings.TWILIO_SMS_NUMBER
        self.base_url = f"https://api.twilio.com/2010-04-01/Accounts/{self.account_sid}"

    async def send_message(self, to_number: str, message: str) -> Dict[str, Any]:
        """
        Sends an SMS via Twilio.

        Args:
            to_number: 10-digit account number (country code added here)
            message: Message text

        Returns:
            {
                "success": True/False,
                "message_sid": "SMxxx...",
                "error": "Optional error message"
            }
        """
        if not to_number.startswith("+"):
            to_number = f"{settings.SMS_COUNTRY_CODE}{to_number}"

        data = {
            "From": self.sender_number,
            "To": to_number,
            "Body": message,
        }

        logger.info(f"📤 Sending SMS to {to_number[:-4]}****")

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self.base_url}/Messages.json",
                    data=data,
                    auth=(self.account_sid, self.auth_token),
                    timeout=10.0
                )
        except httpx.TimeoutException:
            logger.error("Twilio API timeout")
            return {"success": False, "error": "SMS gateway timeout"}
        except httpx.HTTPError as e:
            logger.error(f"Error sending SMS: {e}", exc_info=True)
            return {"success": False, "error": str(e)}

        if response.status_code in (200, 201):
            result = response.json()
            logger.info(f"✅ SMS sent: SID={result.get('sid')}")
            return {
                "success": True,
                "message_sid": result.get("sid"),
                "status": result.get("status")
            }

        logger.error(f"❌ Twilio API error: {response.status_code} - {response.text}")
        return {
            "success": False,
            "error": f"Twilio API error: {response.status_code}"
        }

    def is_configured(self) -> bool:
        """Check if Twilio is properly configured"""
        return bool(
            self.account_sid
            and self.auth_token
            and self.sender_number
            and self.account_sid != "your_twilio_sid"
        )


# Singleton instance
sms_service = SmsService()
