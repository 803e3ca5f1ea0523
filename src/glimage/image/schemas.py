# for reference:
#   https://json-schema.org/understanding-json-schema/reference/object
#   https://github.com/opencontainers/image-spec/blob/main/config.md
#   https://github.com/moby/moby/blob/master/image/spec/specs-go/v1/image.go

schema_url = "http://json-schema.org/draft-07/schema"

uint16_max = 2**16 - 1
uint32_max = 2**32 - 1
uint64_max = 2**64 - 1

stringList = {"type": ["array", "null"], "items": {"type": "string"}}
stringMap = {"type": ["object", "null"], "additionalProperties": {"type": "string"}}
emptyObjectSet = {"type": ["object", "null"], "additionalProperties": {"type": "object"}}


def unsigned(maximum: int) -> dict:
    return {"type": ["integer", "null"], "minimum": 0, "maximum": maximum}


# OCI image configuration, the base layer

ociConfigProperties = {
    "User": {"type": ["string", "null"]},
    "ExposedPorts": emptyObjectSet,
    "Env": stringList,
    "Entrypoint": stringList,
    "Cmd": stringList,
    "Volumes": emptyObjectSet,
    "WorkingDir": {"type": ["string", "null"]},
    "Labels": stringMap,
    "StopSignal": {"type": ["string", "null"]},
}

rootfsProperties = {
    "type": {"type": "string"},
    "diff_ids": {"type": "array", "items": {"type": "string"}},
}

historyProperties = {
    "created": {"type": ["string", "null"]},
    "author": {"type": ["string", "null"]},
    "created_by": {"type": ["string", "null"]},
    "comment": {"type": ["string", "null"]},
    "empty_layer": {"type": ["boolean", "null"]},
}

imageConfigurationProperties = {
    "created": {"type": ["string", "null"]},
    "author": {"type": ["string", "null"]},
    "architecture": {"type": "string"},
    "os": {"type": "string"},
    "os.version": {"type": ["string", "null"]},
    "os.features": stringList,
    "variant": {"type": ["string", "null"]},
    "config": {
        "type": ["object", "null"],
        "properties": ociConfigProperties,
        "additionalProperties": True,
    },
    "rootfs": {
        "type": ["object", "null"],
        "required": ["type", "diff_ids"],
        "properties": rootfsProperties,
        "additionalProperties": True,
    },
    "history": {
        "type": ["array", "null"],
        "items": {
            "type": "object",
            "properties": historyProperties,
            "additionalProperties": True,
        },
    },
}

image_configuration = {
    "$schema": schema_url,
    "title": "OCI Image Configuration Schema",
    "type": "object",
    "required": [
        "architecture",
        "os",
    ],
    "properties": imageConfigurationProperties,
    "additionalProperties": True,
}


# Docker extension, layered into the same object

healthcheckProperties = {
    "Test": stringList,
    "Interval": unsigned(uint64_max),
    "Timeout": unsigned(uint64_max),
    "StartInterval": unsigned(uint64_max),
    "Retries": unsigned(uint32_max),
}

healthcheck = {
    "type": ["object", "null"],
    "properties": healthcheckProperties,
    "additionalProperties": True,
}

configExtensionProperties = {
    "Memory": unsigned(uint64_max),
    "MemorySwap": unsigned(uint64_max),
    "CpuShares": unsigned(uint16_max),
    "ArgsEscaped": {"type": ["boolean", "null"]},
    "Healthcheck": healthcheck,
    # moby writes Healthcheck, some tools write the PascalCase spelling
    "HealthCheck": healthcheck,
    "OnBuild": stringList,
    "Shell": stringList,
}

image_configuration_extension = {
    "$schema": schema_url,
    "title": "Docker Image Configuration Extension Schema",
    "type": "object",
    "properties": {
        "config": {
            "type": ["object", "null"],
            "properties": configExtensionProperties,
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}


# docker save artifacts

platformProperties = {
    "architecture": {"type": "string"},
    "os": {"type": "string"},
    "os.version": {"type": "string"},
    "os.features": {"type": "array", "items": {"type": "string"}},
    "variant": {"type": "string"},
}

descriptorProperties = {
    "mediaType": {"type": "string"},
    "digest": {"type": "string"},
    "size": {"type": "integer", "minimum": 0},
    "urls": {"type": ["array", "null"], "items": {"type": "string"}},
    "annotations": stringMap,
    "platform": {
        "type": ["object", "null"],
        "required": ["architecture", "os"],
        "properties": platformProperties,
    },
    "artifactType": {"type": ["string", "null"]},
}

descriptor = {
    "type": "object",
    "required": ["mediaType", "digest", "size"],
    "properties": descriptorProperties,
    "additionalProperties": True,
}

manifestItemProperties = {
    "Config": {"type": "string"},
    "RepoTags": {"type": ["array", "null"], "items": {"type": "string"}},
    "Layers": {"type": "array", "items": {"type": "string"}},
    "Parent": {"type": ["string", "null"]},
    "LayerSources": {
        "type": ["object", "null"],
        "additionalProperties": descriptor,
    },
}

image_manifest = {
    "$schema": schema_url,
    "title": "Docker Image Manifest Schema",
    "type": "array",
    "items": {
        "type": "object",
        "required": ["Config", "RepoTags", "Layers"],
        "properties": manifestItemProperties,
        "additionalProperties": True,
    },
}

repositories = {
    "$schema": schema_url,
    "title": "Docker Repositories Schema",
    "type": "object",
    "additionalProperties": {
        "type": "object",
        "additionalProperties": {"type": "string"},
    },
}


EmptyRootFs = {
    "type": "layers",
    "diff_ids": [],
}
