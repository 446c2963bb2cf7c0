# src/scheduler/tasks.py
import logging
from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy.orm import Session
from database import SessionLocal
from notifications.services import NotificationService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def send_new_post_notification(post_id: str):
    """Notify all members about a freshly created post."""
    logger.info(f"Starting send_new_post_notification task for post {post_id}")
    db: Session = SessionLocal()
    try:
        NotificationService.notify_new_post(post_id, db)
    except Exception as e:
        logger.error(f"Error in send_new_post_notification: {str(e)}", exc_info=True)
    finally:
        db.close()
    logger.info(f"Finished send_new_post_notification task for post {post_id}")


def schedule_new_post_notification(post_id: str):
    """Fire the notification job once, off the caller's path."""
    scheduler.add_job(send_new_post_notification, args=[post_id])


def start_scheduler():
    """Start the background scheduler."""
    if not scheduler.running:
        scheduler.start()


def shutdown_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=False)
