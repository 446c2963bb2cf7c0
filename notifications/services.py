# src/notifications/services.py
import html
import logging
import smtplib
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import List, Optional
from sqlalchemy.orm import Session
from auth.models import User
from content.models import Post
from config import settings

logger = logging.getLogger(__name__)


class EmailService:
    @staticmethod
    def send_email(recipients: List[str], subject: str, body: str, subtype: str = "plain") -> None:
        """Send one message to all recipients over SMTP."""
        msg = MIMEText(body, subtype, "utf-8")
        msg["Subject"] = subject
        msg["From"] = formataddr((settings.FROM_NAME, settings.FROM_EMAIL))
        # Recipients go in the envelope only so members never see each other's addresses.
        msg["To"] = settings.FROM_EMAIL if len(recipients) > 1 else recipients[0]

        with smtplib.SMTP(settings.SMTP_SERVER, settings.SMTP_PORT) as server:
            server.starttls()
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
            server.sendmail(settings.FROM_EMAIL, recipients, msg.as_string())


class NotificationService:
    @staticmethod
    def collect_recipients(db: Session) -> List[str]:
        """Every user record with a present email."""
        emails = db.query(User.email).all()
        return [email for (email,) in emails if email]

    @staticmethod
    def build_new_post_email(post: Post) -> str:
        parts = [f"<h2>{html.escape(post.title)}</h2>"]
        if post.author_name:
            parts.append(f"<p><strong>Posted by:</strong> {html.escape(post.author_name)}</p>")
        if post.content:
            parts.append(f"<p>{html.escape(post.content)}</p>")
        if post.image_url:
            parts.append(f'<img src="{html.escape(post.image_url)}" style="max-width:100%;margin-top:10px" />')
        return "".join(parts)

    @staticmethod
    def notify_new_post(post_id: str, db: Session) -> Optional[int]:
        """Email every member about a new post. Returns the recipient count."""
        post = db.query(Post).filter(Post.id == post_id).first()
        if not post:
            logger.info(f"Post {post_id} no longer exists, skipping notification")
            return None

        recipients = NotificationService.collect_recipients(db)
        if not recipients:
            return 0

        EmailService.send_email(
            recipients,
            f"New post: {post.title}",
            NotificationService.build_new_post_email(post),
            subtype="html",
        )
        logger.info(f"Sent new post notification for {post_id} to {len(recipients)} recipients")
        return len(recipients)
