"""
Connection factory implementation
"""
from ...core.interfaces import ConnectionFactory
from ...core.client import RemoteClient, ConnectionParams


class RemoteConnectionFactory(ConnectionFactory):
    """RemoteClient connection factory"""
    
    def create(self, params: ConnectionParams) -> RemoteClient:
        """
        Create and connect SSH client.
        
        Args:
            params: Connection parameters
        
        Returns:
            Connected RemoteClient instance
        
        Raises:
            ConnectError: If the host cannot be reached
            AuthError: If authentication fails
        """
        client = RemoteClient(params)
        client.connect()
        return client
