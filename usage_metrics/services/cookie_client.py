"""Client for the cookie storage service (gRPC)."""

import logging
from typing import Optional

import grpc
from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

from ..config.models import CookieServiceConfig
from ..utils.errors import ConfigurationMissing, UpstreamUnreachable


def _build_messages():
    """
    Build the GetCookies request/response message classes.

    message GetCookiesRequest { string host = 1; }
    message GetCookiesResponse { string cookies = 1; }
    """
    field_type = descriptor_pb2.FieldDescriptorProto
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="usage_metrics/cookies.proto",
        package="cookies",
        syntax="proto3"
    )

    request = file_proto.message_type.add(name="GetCookiesRequest")
    request.field.add(
        name="host", number=1,
        type=field_type.TYPE_STRING, label=field_type.LABEL_OPTIONAL
    )

    response = file_proto.message_type.add(name="GetCookiesResponse")
    response.field.add(
        name="cookies", number=1,
        type=field_type.TYPE_STRING, label=field_type.LABEL_OPTIONAL
    )

    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(file_proto.SerializeToString())
    return (
        message_factory.GetMessageClass(pool.FindMessageTypeByName("cookies.GetCookiesRequest")),
        message_factory.GetMessageClass(pool.FindMessageTypeByName("cookies.GetCookiesResponse")),
    )


GetCookiesRequest, GetCookiesResponse = _build_messages()


class CookieClient:
    """Fetches stored browser cookies for a host from the cookie service."""

    def __init__(self, config: CookieServiceConfig, logger: logging.Logger):
        """
        Initialize cookie client.

        Args:
            config: Cookie service configuration
            logger: Logger instance
        """
        self.config = config
        self.logger = logger.getChild("CookieClient")

    async def get_cookies(self, host: str, provider: Optional[str] = None) -> str:
        """
        Fetch the Cookie header value for a host.

        Args:
            host: Host the cookies were stored for (e.g. "claude.ai")
            provider: Provider label for error context

        Returns:
            str: Cookie header value

        Raises:
            ConfigurationMissing: If no service address is configured or no
                cookies are stored for the host
            UpstreamUnreachable: If the RPC fails
        """
        provider = provider or "unknown"
        if not self.config.address:
            raise ConfigurationMissing("COOKIE_SERVICE_ADDR", provider=provider)

        self.logger.debug(f"Requesting cookies for {host} from {self.config.address}")

        try:
            async with grpc.aio.insecure_channel(self.config.address) as channel:
                get_cookies = channel.unary_unary(
                    self.config.method,
                    request_serializer=GetCookiesRequest.SerializeToString,
                    response_deserializer=GetCookiesResponse.FromString
                )
                response = await get_cookies(
                    GetCookiesRequest(host=host),
                    timeout=self.config.timeout_seconds
                )
        except grpc.RpcError as e:
            raise UpstreamUnreachable(
                f"Cookie service {self.config.address} failed for host {host}: {e}",
                provider=provider,
                step="cookies"
            ) from e

        if not response.cookies:
            raise ConfigurationMissing(f"cookies for host {host}", provider=provider)

        return response.cookies
