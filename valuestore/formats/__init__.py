# valuestore/formats/__init__.py

from valuestore.core.models import StoreOptions, StoreType

from .base import Codec
from .json_codec import JsonCodec
from .xml_codec import XmlCodec
from .yaml_codec import YamlCodec
from .php_codec import PhpCodec


def get_codec(options: StoreOptions) -> Codec:
    """Return the codec a store saves and loads with (pretty output where the format has one)."""
    if options.type == StoreType.JSON:
        return JsonCodec(pretty=True, escape=options.escape)
    elif options.type == StoreType.XML:
        return XmlCodec(root=options.root, pretty=True)
    elif options.type == StoreType.YML:
        return YamlCodec()
    elif options.type == StoreType.PHP:
        return PhpCodec()
    else:
        raise ValueError(f"No codec for store type: {options.type}")


__all__ = [
    'Codec',
    'JsonCodec',
    'XmlCodec',
    'YamlCodec',
    'PhpCodec',
    'get_codec',
]
