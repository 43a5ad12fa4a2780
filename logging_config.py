"""
Centralized logging configuration for the Event Hub provisioning sample.
Quiets the chatty Azure SDK loggers (HTTP policy, identity, LRO polling)
while keeping the sample's own progress lines visible.
"""

import logging
import os


APP_LOGGERS = [
    'EventHubProvisioner',
    'ResourceGroupScope',
    'ProvisioningLogger',
    'AzureClients',
    'ListenerProbe',
    'ManageEventHub',
]


def configure_logging(app_level: str = "INFO"):
    """
    Configure logging levels to suppress verbose Azure library logs

    Args:
        app_level: Logging level for the application loggers (DEBUG, INFO, WARNING, ERROR)
    """

    app_log_level = getattr(logging, app_level.upper(), logging.INFO)

    logging.basicConfig(
        level=app_log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Every management call logs its full request/response at INFO otherwise
    azure_loggers = [
        'azure.core',
        'azure.core.pipeline',
        'azure.core.pipeline.policies',
        'azure.core.pipeline.policies.http_logging_policy',
        'azure.core.polling',
        'azure.identity',
        'azure.mgmt',
        'azure.mgmt.eventhub',
        'azure.mgmt.storage',
        'azure.mgmt.resource',
        'azure.eventhub',
        'uamqp',
        'msal',
    ]

    for logger_name in azure_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logging.getLogger('azure.eventhub._pyamqp').setLevel(logging.ERROR)

    for logger_name in APP_LOGGERS:
        logging.getLogger(logger_name).setLevel(app_log_level)


# Auto-configure when imported (can be disabled by setting environment variable)
if not os.getenv('SKIP_AUTO_LOG_CONFIG'):
    configure_logging(os.getenv('LOG_LEVEL', 'INFO'))
