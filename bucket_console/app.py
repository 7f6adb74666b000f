"""Flask application: JSON routes for logs and files, plus the console page."""

import logging
import os

from flask import Flask, jsonify, render_template, request

from bucket_console.clients import ServiceHandles
from bucket_console.config import Config
from bucket_console.errors import PollInProgressError, QueueError, StorageError
from bucket_console.feed import LogFeed, start_feed_scheduler
from bucket_console.filters import filter_entries
from bucket_console.poller import LogPoller
from bucket_console.storage import FileManager

logger = logging.getLogger(__name__)


def _failure(message, status):
    return jsonify({"success": False, "message": message}), status


def create_app(config=None, file_manager=None, poller=None, feed=None):
    """Flask application factory.

    ``file_manager`` and ``poller`` default to ones backed by boto3 clients
    built from ``config``; tests pass in-memory replacements. The feed polls
    through its own fork of ``poller`` so a background refresh never blocks
    a direct ``/logs`` request.

    With ``logs.background_poll`` on, the page reads ``/logs/feed`` so the
    scheduler is the only queue consumer.
    """
    app = Flask(__name__)

    if config is None:
        config = Config(os.environ.get("CONFIG_PATH", "config.yaml"))

    handles = ServiceHandles(config)
    if file_manager is None:
        file_manager = FileManager(
            handles.object_store(),
            prefix=config["storage"]["prefix"],
            url_ttl_seconds=config["storage"]["url_ttl_seconds"],
        )
    if poller is None:
        poller = LogPoller(
            handles.log_queue(),
            max_messages=config["queue"]["max_messages"],
            wait_seconds=config["queue"]["wait_seconds"],
        )
    if feed is None:
        feed = LogFeed(poller.fork())
    background_poll = config["logs"]["background_poll"]

    app.config["components"] = {
        "config": config,
        "handles": handles,
        "file_manager": file_manager,
        "poller": poller,
        "feed": feed,
    }

    if background_poll:
        scheduler = start_feed_scheduler(feed, config["logs"]["poll_interval_seconds"])
        app.config["components"]["scheduler"] = scheduler

        import atexit
        atexit.register(scheduler.shutdown, wait=False)

    # --- Routes ---

    @app.route("/health")
    def health():
        return jsonify({
            "status": "healthy",
            "bucket": handles.bucket_configured,
            "queue": poller.configured,
        })

    @app.route("/logs", methods=["GET"])
    def get_logs():
        try:
            entries = poller.poll()
        except PollInProgressError as exc:
            return _failure(f"Failed to fetch logs: {exc}", 409)
        except QueueError as exc:
            return _failure(f"Failed to fetch logs: {exc}", 500)
        except Exception as exc:
            logger.exception("Error in logs route")
            return _failure(f"Failed to fetch logs: {exc}", 500)

        entries = filter_entries(entries, request.args.get("level"), request.args.get("search"))
        return jsonify({"success": True, "logs": [e.to_dict() for e in entries]})

    @app.route("/logs/feed", methods=["GET"])
    def get_log_feed():
        return jsonify(feed.snapshot(request.args.get("level"), request.args.get("search")))

    @app.route("/files", methods=["GET"])
    def list_files():
        try:
            files = file_manager.list_files()
        except StorageError:
            logger.exception("Error fetching files")
            return _failure("Failed to fetch files", 500)
        return jsonify({"success": True, "files": [f.to_dict() for f in files]})

    @app.route("/files", methods=["POST"])
    def upload_files():
        uploads = [f for f in request.files.getlist("files") if f.filename]
        if not uploads:
            return _failure("No files provided", 400)

        results = []
        try:
            for upload in uploads:
                results.append(file_manager.upload(upload.filename, upload.read(), upload.mimetype))
        except StorageError:
            logger.exception("Error uploading files")
            return _failure("Failed to upload files", 500)

        return jsonify({
            "success": True,
            "message": f"Successfully uploaded {len(results)} file(s)",
            "files": results,
        })

    @app.route("/files", methods=["DELETE"])
    def delete_file():
        data = request.get_json(silent=True) or {}
        file_id = data.get("fileId")
        if not file_id:
            return _failure("File ID is required", 400)

        try:
            file_manager.delete(file_id)
        except StorageError:
            logger.exception("Error deleting file %s", file_id)
            return _failure("Failed to delete file", 500)
        return jsonify({"success": True, "message": "File deleted successfully"})

    @app.route("/")
    def index():
        return render_template(
            "index.html",
            poll_interval_ms=config["logs"]["poll_interval_seconds"] * 1000,
            logs_url="/logs/feed" if background_poll else "/logs",
        )

    return app
