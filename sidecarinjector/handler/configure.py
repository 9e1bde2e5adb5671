import logging

import kopf

from sidecarinjector.configuration import configuration


@kopf.on.startup()
def configure_settings(settings: kopf.OperatorSettings, logger, **_):
    logger.info(f"Sidecar injector starting with the following configuration: {configuration}")
    settings.peering.standalone = True
    settings.posting.level = logging.INFO
    settings.posting.enabled = False
    settings.execution.max_workers = configuration.MAX_WORKERS
    settings.admission.server = kopf.WebhookServer(
        port=configuration.WEBHOOK_PORT,
        certfile=configuration.WEBHOOK_CERTFILE,
        pkeyfile=configuration.WEBHOOK_PKEYFILE,
        host=configuration.WEBHOOK_HOST,
    )
