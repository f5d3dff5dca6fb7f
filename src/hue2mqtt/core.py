from .mixins.helpers import HelpersMixin
from .mixins.topics import TopicsMixin
from .mixins.mqtt import MqttMixin
from .mixins.publish import PublishMixin
from .mixins.hue_api import HueAPIMixin
from .mixins.scan import ScanMixin
from .mixins.refresh import RefreshMixin
from .mixins.loops import LoopsMixin
from .base import Base


class Hue2Mqtt(
    HelpersMixin,
    TopicsMixin,
    PublishMixin,
    HueAPIMixin,
    ScanMixin,
    RefreshMixin,
    LoopsMixin,
    MqttMixin,
    Base,
):
    pass
