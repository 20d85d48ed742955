"""
Messaggi di promemoria per check-up e scadenze
Progetto: CRM Utenze

Testi generati con Jinja2 (cartella templates/messages) e link di
contatto pronti per email, WhatsApp e SMS.
"""

import datetime
import logging
import os
import re
from typing import Optional
from urllib.parse import quote

from jinja2 import Environment, FileSystemLoader

from crm.core.config import Settings
from crm.schemas.client import ClientRead
from crm.schemas.contract import ContractRead
from crm.schemas.dashboard import CheckupItem, CheckupType, ReminderMessage

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Path alla cartella dei template dei messaggi
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
TEMPLATES_DIR = os.path.join(BASE_DIR, "templates", "messages")

CHECKUP_PERIODS = {
    CheckupType.T4: "4 mesi circa",
    CheckupType.T8: "8 mesi circa",
}


def format_date(value: Optional[datetime.date]) -> str:
    """Data in formato gg/mm/aaaa, stringa vuota se assente."""
    return value.strftime("%d/%m/%Y") if value else ""


def whatsapp_phone(raw: Optional[str]) -> Optional[str]:
    """
    Numero per wa.me: solo cifre, con prefisso 39 per i cellulari
    italiani scritti senza prefisso (10 cifre che iniziano per 3).
    """
    digits = re.sub(r"\D", "", raw or "")
    if not digits:
        return None
    if len(digits) == 10 and digits.startswith("3") and not digits.startswith("39"):
        digits = "39" + digits
    return digits


def mailto_link(email: Optional[str], subject: str, body: str) -> Optional[str]:
    if not email:
        return None
    return f"mailto:{email}?subject={quote(subject)}&body={quote(body)}"


def whatsapp_link(phone: Optional[str], text: str) -> Optional[str]:
    number = whatsapp_phone(phone)
    if number is None:
        return None
    return f"https://wa.me/{number}?text={quote(text)}"


def sms_link(phone: Optional[str], text: str) -> Optional[str]:
    digits = re.sub(r"\D", "", phone or "")
    if not digits:
        return None
    return f"sms:{digits}?body={quote(text)}"


class ReminderMessageService:
    """
    Compone i messaggi rivolti al cliente.

    La firma (nome, cellulare, email) viene dalle impostazioni; le parti
    non configurate vengono omesse.
    """

    def __init__(self, config: Settings):
        self.config = config
        self.env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def _agent(self) -> dict:
        return {
            "name": self.config.agent_name,
            "phone": self.config.agent_phone,
            "email": self.config.agent_email,
        }

    def _render(self, template_name: str, **context) -> str:
        template = self.env.get_template(template_name)
        return template.render(agent=self._agent(), **context).strip()

    def _build(
        self,
        client: ClientRead,
        subject: str,
        email_body: str,
        short_body: str,
    ) -> ReminderMessage:
        return ReminderMessage(
            subject=subject,
            email_body=email_body,
            short_body=short_body,
            mailto=mailto_link(client.email, subject, email_body),
            whatsapp=whatsapp_link(client.mobile_phone, short_body),
            sms=sms_link(client.mobile_phone, short_body),
        )

    def checkup_message(self, item: CheckupItem, client: ClientRead) -> ReminderMessage:
        """Richiesta dell'ultima bolletta per il controllo T4 / T8."""
        context = {
            "client": client,
            "contract": item.contract,
            "period": CHECKUP_PERIODS[item.type],
        }
        subject = f"Check-up Contratto {item.contract.provider} - Controllo Fattura ({item.type.value})"
        logger.debug("Messaggio check-up %s per cliente %s", item.key, client.id)
        return self._build(
            client,
            subject,
            self._render("checkup_email.txt.j2", **context),
            self._render("checkup_short.txt.j2", **context),
        )

    def expiry_message(self, contract: ContractRead, client: ClientRead) -> ReminderMessage:
        """Promemoria di rinnovo per un contratto in scadenza."""
        address = None
        if contract.supply_address is not None:
            parts = [contract.supply_address.street, contract.supply_address.city]
            address = " ".join(p for p in parts if p) or None

        context = {
            "client": client,
            "contract": contract,
            "address": address,
            "end_date": format_date(contract.end_on),
        }
        subject = f"Promemoria Scadenza Contratto: {contract.provider}"
        logger.debug("Messaggio scadenza contratto %s per cliente %s", contract.id, client.id)
        return self._build(
            client,
            subject,
            self._render("expiry_email.txt.j2", **context),
            self._render("expiry_short.txt.j2", **context),
        )
