"""
Daily reminder job.

Meant to be started by cron once a day, e.g. at 09:00 Europe/Warsaw:

    0 9 * * *  cd /srv/wb-rent && venv/bin/python scheduler.py

Re-running it the same day sends nothing twice: every reminder is marked on
the reservation once it has gone out.
"""
from app import create_app
from services.reminders import send_daily_reminders
from utils.logger import get_logger

logger = get_logger()


def main():
    app = create_app()
    with app.app_context():
        sent_pickup, sent_return = send_daily_reminders()
    logger.info(f"Scheduler run finished: {sent_pickup} pickup, {sent_return} return reminders")


if __name__ == "__main__":
    main()
