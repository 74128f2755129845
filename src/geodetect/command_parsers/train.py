import logging


logger = logging.getLogger(__name__)


def handle_command(options, client):
    logger.info('Training %s ..' % options.detector)
    client.train_detector(options.detector)
    logger.info('Training of %s finished' % options.detector)


def set_parser(parser):
    train_parser = parser.add_parser('train', help="Trains a detector")
    train_parser.add_argument("detector", help="ID of a detector", type=str)
    train_parser.set_defaults(func=handle_command)
