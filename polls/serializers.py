from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from .models import Poll, PollVote


class PollCreateSerializer(serializers.Serializer):
    group_id = serializers.IntegerField()
    question = serializers.CharField(max_length=500)
    options = serializers.ListField(child=serializers.CharField(allow_blank=True), min_length=2)
    multiple_choice = serializers.BooleanField(default=False)
    expires_at = serializers.DateTimeField(required=False, allow_null=True)


class PollSerializer(serializers.ModelSerializer):
    created_by = UserSummarySerializer(read_only=True)
    options = serializers.SerializerMethodField()
    total_votes = serializers.SerializerMethodField()
    expired = serializers.SerializerMethodField()
    has_voted = serializers.SerializerMethodField()

    class Meta:
        model = Poll
        fields = [
            'id', 'question', 'group', 'created_by', 'multiple_choice',
            'expires_at', 'expired', 'options', 'total_votes', 'has_voted', 'created_at',
        ]
        read_only_fields = fields

    def _results(self, obj):
        # options and total_votes share one tally per poll
        cache = self.context.setdefault('_poll_results', {})
        if obj.pk not in cache:
            cache[obj.pk] = obj.results()
        return cache[obj.pk]

    def get_options(self, obj):
        results = self._results(obj)['options']
        request = self.context.get('request')
        if request is not None:
            mine = set(
                PollVote.objects.filter(option__poll=obj, user=request.user).values_list('option_id', flat=True)
            )
            for row in results:
                row['voted'] = row['id'] in mine
        return results

    def get_total_votes(self, obj):
        return self._results(obj)['total_votes']

    def get_expired(self, obj):
        return obj.is_expired()

    def get_has_voted(self, obj):
        request = self.context.get('request')
        return bool(request) and obj.has_voted(request.user)
