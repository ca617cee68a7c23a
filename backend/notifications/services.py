from django.conf import settings
from django.core.mail import send_mail
from django.template.loader import render_to_string
from django.utils import timezone
import logging

from payments.money import format_money
from settings.config import app_settings

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self):
        # Format the sender's email to include the business name
        from_email_address = getattr(settings, "DEFAULT_FROM_EMAIL", "orders@example.com")
        self.default_from_email = f"{app_settings.business_name} <{from_email_address}>"

    def send_email(self, recipient_list, subject, template_name, context):
        """
        Sends an email using a Django template.

        Args:
            recipient_list (list): A list of recipient email addresses.
            subject (str): The subject of the email.
            template_name (str): The path to the email template (e.g., 'emails/order-created.html').
            context (dict): A dictionary of data to render in the template.
        """
        html_message = render_to_string(template_name, context)
        send_mail(
            subject,
            "",  # Empty message, as we are sending HTML
            self.default_from_email,
            recipient_list,
            html_message=html_message,
            fail_silently=False,
        )

    def _business_recipients(self):
        recipients = list(getattr(settings, "ORDER_NOTIFICATION_EMAILS", []))
        if app_settings.notification_email and app_settings.notification_email not in recipients:
            recipients.append(app_settings.notification_email)
        return recipients

    def _order_context(self, order):
        currency = app_settings.currency
        return {
            "business_name": app_settings.business_name,
            "orders_url": f"{settings.FRONTEND_URL.rstrip('/')}/user/my-orders",
            "customer_name": order.customer_display_name,
            "order": {
                "order_number": order.order_number,
                "order_type": order.get_order_type_display(),
                "status": order.get_status_display(),
                "payment_status": order.get_payment_status_display(),
                "delivery_date": order.delivery_date,
                "delivery_time": order.delivery_time,
                "items": [
                    {
                        "name": item.name or "Item",
                        "quantity": item.quantity.normalize(),
                        "price": format_money(currency, item.price),
                        "total": format_money(currency, item.grand_price),
                    }
                    for item in order.items.all()
                ],
                "total": format_money(currency, order.total),
                "discount": format_money(currency, order.discount + order.manual_discount),
                "delivery_charge": format_money(currency, order.delivery_charge),
                "fees": format_money(currency, order.specialty_item_shopping_fee + order.service_charge),
                "has_fees": bool(order.specialty_item_shopping_fee or order.service_charge),
                "grand_total": format_money(currency, order.grand_total),
                "created_at": timezone.localtime(order.created_at).strftime("%B %d, %Y at %I:%M %p"),
            },
        }

    def send_new_order_notification(self, order):
        """
        Send the "new order" email to the customer and to the business
        notification addresses.

        Returns:
            bool: True if an email was sent
        """
        recipients = self._business_recipients()
        if order.customer_email:
            recipients.insert(0, order.customer_email)

        if not recipients:
            logger.warning(f"No recipients for new order notification of Order #{order.order_number}")
            return False

        try:
            self.send_email(
                recipients,
                f"New order #{order.order_number}",
                "emails/order-created.html",
                self._order_context(order),
            )
            logger.info(
                f"New order notification sent for Order #{order.order_number} to {len(recipients)} recipient(s)"
            )
            return True
        except Exception as e:
            logger.error(
                f"Failed to send new order notification for Order #{order.order_number}: {e}"
            )
            return False

    def send_order_status_notification(self, order):
        """
        Tell the customer their order changed.

        Returns:
            bool: True if the email was sent
        """
        if not order.customer_email:
            logger.info(f"Order #{order.order_number} has no customer email, skipping status update")
            return False

        try:
            self.send_email(
                [order.customer_email],
                "Order Update",
                "emails/order-status.html",
                self._order_context(order),
            )
            logger.info(f"Status update email sent for Order #{order.order_number}")
            return True
        except Exception as e:
            logger.error(f"Failed to send status update for Order #{order.order_number}: {e}")
            return False
