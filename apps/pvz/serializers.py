from rest_framework import serializers

from apps.receptions.serializers import ReceptionWithProductsSerializer

from .models import PVZ


class PVZSerializer(serializers.ModelSerializer):
    """PVZ as stored."""

    class Meta:
        model = PVZ
        fields = [
            'id',
            'city',
            'created_at',
        ]
        read_only_fields = ['id', 'created_at']


class PVZWriteSerializer(serializers.Serializer):
    """
    Input for creating or renaming a PVZ.

    Only presence is checked here; length and the allow-list are
    enforced by PVZManager.
    """

    city = serializers.CharField(max_length=255, trim_whitespace=True)


class PVZWithReceptionsSerializer(PVZSerializer):
    """PVZ with receptions in the requested date range, each with its products."""

    receptions = serializers.SerializerMethodField()

    class Meta(PVZSerializer.Meta):
        fields = PVZSerializer.Meta.fields + ['receptions']

    def get_receptions(self, obj):
        receptions = getattr(obj, 'filtered_receptions', None)
        if receptions is None:
            receptions = obj.receptions.order_by('date_time')
        return ReceptionWithProductsSerializer(receptions, many=True).data


class PVZListQuerySerializer(serializers.Serializer):
    """Query parameters of the PVZ listing."""

    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)
    page = serializers.IntegerField(required=False, default=1)
    limit = serializers.IntegerField(required=False, default=10)
