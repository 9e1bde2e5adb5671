import kubernetes as k8s


def read_configmap(namespace: str, name: str) -> k8s.client.V1ConfigMap:
    """
    It reads a configmap, raising ApiException (status 404 if it does not exist)

    :param namespace: The namespace the configmap is located in
    :type namespace: str
    :param name: The name of the configmap
    :type name: str
    :return: The configmap
    """
    core_v1_api = k8s.client.CoreV1Api()
    return core_v1_api.read_namespaced_config_map(name=name, namespace=namespace)
